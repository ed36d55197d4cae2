import pytest

from subscriptions_svc.config import Settings

DB_VARS = ('DATABASE_URL', 'DB_HOST', 'DB_PORT', 'DB_USER', 'DB_PASSWORD', 'DB_NAME', 'DB_SSLMODE')


@pytest.fixture
def clean_env(monkeypatch):
    for name in DB_VARS + ('PORT', 'COST_HORIZON_YEARS', 'CREATE_SCHEMA', 'LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings()
    assert settings.port == 8080
    assert settings.cost_horizon_years == 10
    assert settings.create_schema is True
    assert settings.log_level == 'INFO'
    assert settings.database_url == 'sqlite:///./subscriptions.db'


def test_database_url_takes_precedence(clean_env):
    clean_env.setenv('DATABASE_URL', 'sqlite:///tmp/test.db')
    clean_env.setenv('DB_HOST', 'db')
    assert Settings().database_url == 'sqlite:///tmp/test.db'


def test_database_url_built_from_parts(clean_env):
    clean_env.setenv('DB_HOST', 'db')
    clean_env.setenv('DB_PORT', '6543')
    clean_env.setenv('DB_USER', 'app')
    clean_env.setenv('DB_PASSWORD', 'pw')
    clean_env.setenv('DB_NAME', 'subs')
    clean_env.setenv('DB_SSLMODE', 'require')
    assert Settings().database_url == 'postgresql+psycopg://app:pw@db:6543/subs?sslmode=require'


def test_overrides(clean_env):
    clean_env.setenv('PORT', '9000')
    clean_env.setenv('COST_HORIZON_YEARS', '3')
    clean_env.setenv('CREATE_SCHEMA', 'false')
    clean_env.setenv('LOG_LEVEL', 'debug')
    settings = Settings()
    assert settings.port == 9000
    assert settings.cost_horizon_years == 3
    assert settings.create_schema is False
    assert settings.log_level == 'DEBUG'


def test_invalid_integer_names_variable(clean_env):
    clean_env.setenv('PORT', 'eighty')
    with pytest.raises(ValueError, match='PORT'):
        Settings()


@pytest.mark.parametrize('value', ['-1', '1001'])
def test_cost_horizon_years_out_of_range_is_rejected(clean_env, value):
    clean_env.setenv('COST_HORIZON_YEARS', value)
    with pytest.raises(ValueError, match='COST_HORIZON_YEARS'):
        Settings()


def test_cost_horizon_years_bounds_are_accepted(clean_env):
    clean_env.setenv('COST_HORIZON_YEARS', '0')
    assert Settings().cost_horizon_years == 0
    clean_env.setenv('COST_HORIZON_YEARS', '1000')
    assert Settings().cost_horizon_years == 1000


def test_port_out_of_range_is_rejected(clean_env):
    clean_env.setenv('PORT', '70000')
    with pytest.raises(ValueError, match='PORT'):
        Settings()
