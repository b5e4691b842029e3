"""Engine Layer - Daily Sales Aggregation Pipeline

This module provides the core engine layer, implementing:
- DailySalesOrchestrator: Main entry point (collect → fetch → aggregate → assemble)
- TimeBudget: Per-invocation wall-clock budget (20s default)
- OrderIndexCollector: Paged order-id collection (fatal on listing errors)
- BoundedFetcher: Fixed-size concurrent batches with per-request timeout
- SalesAggregator: Per-product rollup fold
- Results: Tagged per-fetch outcomes and phase reports
"""

from .aggregator import SalesAggregator, aggregate_orders
from .assembler import assemble_result, build_budget_report
from .budget import TimeBudget
from .collector import OrderIndexCollector
from .fetcher import BoundedFetcher
from .orchestrator import DailySalesOrchestrator, SalesPipelineConfig, SalesRunOutcome
from .result import CollectedOrders, FetchOutcome, FetchReport, FetchStatus, PipelinePhase

__all__ = [
    "DailySalesOrchestrator",
    "SalesPipelineConfig",
    "SalesRunOutcome",
    "TimeBudget",
    "OrderIndexCollector",
    "BoundedFetcher",
    "SalesAggregator",
    "aggregate_orders",
    "assemble_result",
    "build_budget_report",
    # Results
    "CollectedOrders",
    "FetchOutcome",
    "FetchReport",
    "FetchStatus",
    "PipelinePhase",
]
