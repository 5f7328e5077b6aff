import time
from dataclasses import dataclass
from dataclasses import field


@dataclass
class AggregationStats:
    total: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    pom_licenses: int = 0
    bundled_licenses: int = 0
    duplicates: int = 0
    start_time: float = field(default_factory=time.time)

    def inc_skipped(self, count: int = 1):
        self.skipped += count

    def inc_failed(self, count: int = 1):
        self.failed += count

    def record_insert(self, inserted: bool, bundled: bool = False):
        if not inserted:
            self.duplicates += 1
        elif bundled:
            self.bundled_licenses += 1
        else:
            self.pom_licenses += 1

    @property
    def licenses_written(self) -> int:
        return self.pom_licenses + self.bundled_licenses

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time
