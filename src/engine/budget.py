"""Time Budget - Wall-clock budget for one aggregation run

호출 시작 시 한 번 생성되어 파이프라인 전체에 값으로 전달됩니다.
- 전체: 20초 (기본값)
- 체크포인트(페이지 조회 전, 배치 시작 전)에서만 확인
- 이미 시작된 요청을 중단하지 않음 (단일 요청 타임아웃이 별도로 존재)
"""

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable


@dataclass(frozen=True)
class TimeBudget:
    """읽기 전용 시간 예산

    생성 후 변경되지 않으므로 동시에 실행되는 여러 작업에 그대로 공유할 수 있습니다.
    호출마다 새로 만들며, 전역 상태로 보관하지 않습니다.

    Usage:
        budget = TimeBudget.start(20_000)

        if budget.ok():
            # 다음 배치 실행
            pass

        report = budget.get_report()
    """

    start_time: float
    budget_ms: int
    clock: Callable[[], float] = field(default=monotonic, repr=False, compare=False)

    def __post_init__(self):
        """설정 검증"""
        if self.budget_ms < 0:
            raise ValueError(f"budget_ms must be >= 0 (got {self.budget_ms})")

    @classmethod
    def start(cls, budget_ms: int, clock: Callable[[], float] = monotonic) -> "TimeBudget":
        """현재 시각을 시작점으로 예산 생성

        Args:
            budget_ms: 전체 예산 (밀리초)
            clock: 초 단위 시계 (테스트에서 교체)
        """
        return cls(start_time=clock(), budget_ms=budget_ms, clock=clock)

    def elapsed_ms(self) -> float:
        """시작부터 현재까지 경과 시간 (밀리초)"""
        return (self.clock() - self.start_time) * 1000.0

    def remaining_ms(self) -> float:
        """남은 예산 (밀리초). 음수가 되지 않도록 보장."""
        return max(0.0, self.budget_ms - self.elapsed_ms())

    def ok(self) -> bool:
        """예산이 남아 있는가?"""
        return self.elapsed_ms() < self.budget_ms

    def get_report(self) -> dict:
        """예산 사용 리포트

        Returns:
            dict: budget_ms / elapsed_ms / remaining_ms / is_exhausted
        """
        elapsed = self.elapsed_ms()
        return {
            "budget_ms": self.budget_ms,
            "elapsed_ms": round(elapsed, 1),
            "remaining_ms": round(max(0.0, self.budget_ms - elapsed), 1),
            "is_exhausted": elapsed >= self.budget_ms,
        }
