import pytest

from onlytests_tools.common.environment import ConfigurationError
from onlytests_tools.common.suite_bootstrap import ARTIFACT_SUBDIRS, RunMetrics, SuiteBootstrap


@pytest.fixture
def bootstrap(environment, structured_log, tmp_path):
    return SuiteBootstrap(environment=environment, log=structured_log, results_dir=tmp_path / "test-results")


def test_initialize_creates_artifact_directories(bootstrap, tmp_path):
    bootstrap.initialize()

    for name in ARTIFACT_SUBDIRS:
        assert (tmp_path / "test-results" / name).is_dir()
    assert bootstrap.is_ready()


def test_directories_are_created_idempotently(bootstrap, tmp_path):
    (tmp_path / "test-results" / "screenshots").mkdir(parents=True)

    bootstrap.setup_test_directories()
    bootstrap.setup_test_directories()

    assert (tmp_path / "test-results" / "traces").is_dir()


def test_initialize_twice_is_a_no_op(bootstrap, log_lines):
    bootstrap.initialize()
    bootstrap.initialize()

    assert sum("Test environment initialized successfully" in line for line in log_lines) == 1
    assert any("Test environment already initialized" in line for line in log_lines)


def test_initialize_fails_on_invalid_configuration(make_environment, structured_log, tmp_path):
    env = make_environment({"ENVIRONMENT": "local", "LOCAL_BASE_URL": "http://localhost:3000"})
    bootstrap = SuiteBootstrap(environment=env, log=structured_log, results_dir=tmp_path / "results")

    with pytest.raises(ConfigurationError, match="LOCAL_API_URL"):
        bootstrap.initialize()

    assert not bootstrap.is_ready()
    assert not (tmp_path / "results").exists()


def test_initialize_logs_environment_info(bootstrap, log_lines):
    bootstrap.initialize()

    env_lines = [line.split("[ENV] ", 1)[1] for line in log_lines if "[ENV]" in line]
    assert env_lines == ["Environment: local", "CI Mode: False", "Headless: True", "Parallel: True", "Workers: 4"]


def test_metrics(bootstrap, log_lines):
    bootstrap.update_test_metrics("ignored_before_init", True, 10)
    assert bootstrap.get_test_metrics() is None

    bootstrap.initialize()
    bootstrap.update_test_metrics("test_a", True, 100)
    bootstrap.update_test_metrics("test_b", False, 300)

    metrics = bootstrap.get_test_metrics()
    assert (metrics.total_tests, metrics.passed_tests, metrics.failed_tests) == (2, 1, 1)
    assert metrics.average_duration == 200
    assert metrics.success_rate == 50

    bootstrap.cleanup()
    assert not bootstrap.is_ready()
    assert any("Test execution summary:" in line and "50.00%" in line for line in log_lines)


def test_empty_metrics():
    metrics = RunMetrics()

    assert metrics.average_duration == 0
    assert metrics.success_rate == 0


def test_environment_status(bootstrap):
    status = bootstrap.get_environment_status()

    assert status["initialized"] is False
    assert status["base_url"] == "http://localhost:3000"
    assert status["timeout"] == 30000
