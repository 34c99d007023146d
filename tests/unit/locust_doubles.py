"""
Test doubles for the Locust engine.

Stand-ins for ``locust.User``, ``locust.env.Environment``, the local
runner and ``locust.stats.StatsCSV``, shaped after the attributes
:class:`LocustTestRunner` touches.
Plan files written by tests subclass :class:`FakeUser` so that plan
loading can be exercised without importing Locust.
"""

from unittest.mock import MagicMock

from api_automation.performance.locust_runner import LocustEngine


PERCENTILES = {0.5: 120, 0.95: 450, 0.99: 800, 1.0: 900}
REPORTED_PERCENTILES = (0.5, 0.95, 0.99, 1.0)


class FakeUser:
    abstract = True


class FakeStatsEntry:
    def __init__(self, name="/posts", method="GET", num_requests=200, num_failures=2):
        self.name = name
        self.method = method
        self.num_requests = num_requests
        self.num_failures = num_failures
        self.median_response_time = 120
        self.avg_response_time = 150.456
        self.min_response_time = 20
        self.max_response_time = 900
        self.avg_content_length = 512
        self.total_rps = 20.0
        self.total_fail_per_sec = 0.2

    def get_response_time_percentile(self, percent):
        return PERCENTILES[percent]


class FakeStats:
    def __init__(self, num_requests=200, num_failures=2):
        entry = FakeStatsEntry(num_requests=num_requests, num_failures=num_failures)
        self.entries = {(entry.name, entry.method): entry}
        self.total = FakeStatsEntry(name="Aggregated", method=None, num_requests=num_requests, num_failures=num_failures)


class FakeStatsCSV:
    """Writes the Locust stats CSV layout from a :class:`FakeStats`, like ``locust.stats.StatsCSV``."""

    def __init__(self, environment, percentiles):
        self.environment = environment
        self.percentiles = percentiles

    def _row(self, entry, entry_type, name):
        return [
            entry_type,
            name,
            entry.num_requests,
            entry.num_failures,
            entry.median_response_time,
            entry.avg_response_time,
            entry.min_response_time,
            entry.max_response_time,
            entry.avg_content_length,
            entry.total_rps,
            entry.total_fail_per_sec,
        ] + [entry.get_response_time_percentile(percent) for percent in self.percentiles]

    def requests_csv(self, csv_writer):
        csv_writer.writerow(
            [
                "Type",
                "Name",
                "Request Count",
                "Failure Count",
                "Median Response Time",
                "Average Response Time",
                "Min Response Time",
                "Max Response Time",
                "Average Content Size",
                "Requests/s",
                "Failures/s",
            ]
            + [f"{int(percent * 100)}%" for percent in self.percentiles]
        )
        stats = self.environment.stats
        for entry in stats.entries.values():
            csv_writer.writerow(self._row(entry, entry.method, entry.name))
        csv_writer.writerow(self._row(stats.total, "", "Aggregated"))


class SilentStatsCSV(FakeStatsCSV):
    """A writer that leaves the results file empty."""

    def requests_csv(self, csv_writer):
        pass


class FakeRunner:
    def __init__(self, start_error=None):
        self.start_error = start_error
        self.started_with = None
        self.greenlet = MagicMock()

    def start(self, user_count, spawn_rate):
        if self.start_error is not None:
            raise self.start_error
        self.started_with = (user_count, spawn_rate)

    def quit(self):
        pass


class FakeEnvironment:
    """Records its constructor arguments; ``instances`` holds every environment built."""

    instances = []
    start_error = None
    stats_factory = FakeStats

    def __init__(self, user_classes, host, parsed_options):
        self.user_classes = user_classes
        self.host = host
        self.parsed_options = parsed_options
        self.stats = FakeEnvironment.stats_factory()
        self.runner = None
        FakeEnvironment.instances.append(self)

    def create_local_runner(self):
        self.runner = FakeRunner(self.start_error)
        return self.runner


def fake_engine(stats_csv_cls=FakeStatsCSV):
    FakeEnvironment.instances = []
    FakeEnvironment.start_error = None
    FakeEnvironment.stats_factory = FakeStats
    return LocustEngine(
        environment_cls=FakeEnvironment,
        user_cls=FakeUser,
        gevent=MagicMock(),
        stats_csv_cls=stats_csv_cls,
        percentiles=REPORTED_PERCENTILES,
    )


PLAN_SOURCE = """\
from tests.unit.locust_doubles import FakeUser


class BrowsingUser(FakeUser):
    abstract = False


class AbstractBase(FakeUser):
    abstract = True
"""
