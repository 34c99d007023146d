"""
k6 scenario script generation.

Each builder returns the JavaScript source of a self-contained k6 script
for one scenario kind.  Scripts always export the full latency trend
(including ``p(99)``) in the end-of-test summary so the runner can parse
every percentile from ``--summary-export``.

The traffic models are:

- **load**: ramp up over 30s, hold the target user count, ramp down
  over 30s; one ``GET /posts`` per iteration with a 1s think time.
- **stress**: ramp up over 60s, hold, ramp down over 60s; each
  iteration fans out to ``/posts``, ``/users`` and ``/comments`` in one
  batch to mimic mixed traffic.
- **spike**: baseline of 10 users, sudden jump to the spike level, hold,
  recover to baseline, ramp down; each request targets a random post id
  so the server cannot answer everything from one cache entry.
"""

from __future__ import annotations

import logging
from pathlib import Path

from api_automation.performance.config import PerformanceConfig
from api_automation.performance.exceptions import ExecutionFailure

logger = logging.getLogger(__name__)

SUMMARY_TREND_STATS = "['avg', 'min', 'med', 'max', 'p(90)', 'p(95)', 'p(99)']"

SPIKE_BASELINE_USERS = 10
MAX_POST_ID = 100

_HEADER = """\
import http from 'k6/http';
import { check, sleep } from 'k6';
import { Rate } from 'k6/metrics';

export let errorRate = new Rate('errors');
"""


def load_test_script(base_url: str, users: int, duration_seconds: int, config: PerformanceConfig) -> str:
    max_error_fraction = config.error_rate_threshold / 100
    return _HEADER + f"""
export let options = {{
    stages: [
        {{ duration: '30s', target: {users} }},
        {{ duration: '{duration_seconds}s', target: {users} }},
        {{ duration: '30s', target: 0 }},
    ],
    thresholds: {{
        http_req_duration: ['p(95)<{config.p95_threshold_ms}'],
        errors: ['rate<{max_error_fraction:g}'],
    }},
    summaryTrendStats: {SUMMARY_TREND_STATS},
}};

export default function() {{
    let response = http.get('{base_url}/posts');
    check(response, {{
        'status is 200': (r) => r.status === 200,
        'response time < {config.p95_threshold_ms}ms': (r) => r.timings.duration < {config.p95_threshold_ms},
    }});
    errorRate.add(response.status !== 200);
    sleep(1);
}}
"""


def stress_test_script(base_url: str, max_users: int, duration_seconds: int, config: PerformanceConfig) -> str:
    return _HEADER + f"""
export let options = {{
    stages: [
        {{ duration: '60s', target: {max_users} }},
        {{ duration: '{duration_seconds}s', target: {max_users} }},
        {{ duration: '60s', target: 0 }},
    ],
    thresholds: {{
        http_req_duration: ['p(99)<{config.p99_threshold_ms}'],
        errors: ['rate<0.05'],
    }},
    summaryTrendStats: {SUMMARY_TREND_STATS},
}};

export default function() {{
    let responses = http.batch([
        ['GET', '{base_url}/posts'],
        ['GET', '{base_url}/users'],
        ['GET', '{base_url}/comments'],
    ]);

    for (let response of responses) {{
        check(response, {{
            'status is 200': (r) => r.status === 200,
        }});
        errorRate.add(response.status !== 200);
    }}

    sleep(Math.random() * 2);
}}
"""


def spike_test_script(base_url: str, spike_users: int, spike_duration_seconds: int, config: PerformanceConfig) -> str:
    return _HEADER + f"""
export let options = {{
    stages: [
        {{ duration: '10s', target: {SPIKE_BASELINE_USERS} }},
        {{ duration: '10s', target: {spike_users} }},
        {{ duration: '{spike_duration_seconds}s', target: {spike_users} }},
        {{ duration: '10s', target: {SPIKE_BASELINE_USERS} }},
        {{ duration: '10s', target: 0 }},
    ],
    thresholds: {{
        http_req_duration: ['p(95)<3000'],
        errors: ['rate<0.1'],
    }},
    summaryTrendStats: {SUMMARY_TREND_STATS},
}};

export default function() {{
    let response = http.get('{base_url}/posts/' + Math.floor(Math.random() * {MAX_POST_ID} + 1));
    check(response, {{
        'status is 200': (r) => r.status === 200,
        'response time < 3000ms': (r) => r.timings.duration < 3000,
    }});
    errorRate.add(response.status !== 200);
    sleep(0.5);
}}
"""


def save_script(content: str, filename: str, reports_directory: str | Path) -> Path:
    """
    Write *content* to ``<reports_directory>/scripts/<filename>``.

    Returns:
        The absolute path of the written script.

    Raises:
        ExecutionFailure: If the directory or file cannot be written.
    """
    script_dir = Path(reports_directory) / "scripts"
    try:
        script_dir.mkdir(parents=True, exist_ok=True)
        script_path = script_dir / filename
        script_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        logger.error("Failed to save k6 script %s: %s", filename, exc)
        raise ExecutionFailure(f"Script generation failed: {exc}") from exc

    logger.debug("Generated k6 script: %s", script_path.resolve())
    return script_path.resolve()
