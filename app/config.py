from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Remote automation webhooks (n8n). Unset URLs surface as notifications.
    sales_webhook_url: str | None = None  # -> [{count_id_north, sum_valor_venda}]
    appointments_webhook_url: str | None = None  # -> [{count_id_agendamento}]
    evaluations_webhook_url: str | None = None  # -> [{count_id_avaliacao}]
    goals_read_webhook_url: str | None = None  # ?ano=YYYY -> [{mes, ano, meta_*}]
    goals_write_webhook_url: str | None = None  # POST full 12-row table
    webhook_timeout_seconds: float = 10.0

    default_tz: str = "America/Sao_Paulo"  # "today" for month defaults and business days
    dashboard_api_key: str | None = None

    # Static client bundle
    dist_dir: str = "dist"

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
