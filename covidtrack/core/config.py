"""
CovidTrack Core Configuration

统一的配置管理，支持环境变量和配置文件
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

JHU_BASE_URL = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_time_series"
)


class DataSourceSettings(BaseSettings):
    """时间序列数据源配置"""

    confirmed_url: str = Field(
        default=f"{JHU_BASE_URL}/time_series_covid19_confirmed_global.csv",
        description="确诊病例时间序列CSV",
    )
    deaths_url: str = Field(
        default=f"{JHU_BASE_URL}/time_series_covid19_deaths_global.csv",
        description="死亡病例时间序列CSV",
    )
    recovered_url: str = Field(
        default=f"{JHU_BASE_URL}/time_series_covid19_recovered_global.csv",
        description="康复病例时间序列CSV（上游已停止更新，允许为空）",
    )


class ImportSettings(BaseSettings):
    """导入流程配置"""

    max_days_to_import: int = Field(default=10, ge=0, description="只保留最近N个日期列")
    max_rows_per_source: Optional[int] = Field(
        default=None, ge=1, description="单个文件最多读取的数据行（None 表示不限制）"
    )
    fetch_timeout: float = Field(default=300.0, gt=0, description="下载超时时间（秒）")
    max_retries: int = Field(default=3, ge=0, le=10, description="HTTP 最大重试次数")
    province_policy: str = Field(
        default="us_only",
        description="省/州行处理策略：us_only（仅汇总美国）或 aggregate_all（全部汇总）",
    )
    auto_import_on_startup: bool = Field(default=True, description="启动时是否预加载")
    retry_failed_load: bool = Field(
        default=True, description="加载失败后，下一次调用是否重新执行导入"
    )

    @field_validator("province_policy")
    @classmethod
    def check_province_policy(cls, v: str) -> str:
        """校验省/州策略名称"""
        value = v.strip().lower()
        if value not in ("us_only", "aggregate_all"):
            raise ValueError(f"Unknown province policy: {v}")
        return value


class AppSettings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # 基本信息
    app_name: str = Field(default="CovidTrack", description="应用名称")
    version: str = Field(default="1.0.0", description="版本号")
    app_env: str = Field(default="development", description="运行环境")
    debug: bool = Field(default=False, description="调试模式")

    # 日志配置
    log_level: str = Field(default="INFO", description="日志级别")
    log_dir: Path = Field(default=Path("logs"), description="日志目录")
    log_to_file: bool = Field(default=False, description="是否写入日志文件")
    log_rotation: str = Field(default="10 MB", description="日志文件轮转大小")
    log_retention: int = Field(default=3, ge=1, description="保留的历史日志文件数")

    # 子配置
    sources: DataSourceSettings = Field(default_factory=DataSourceSettings)
    importer: ImportSettings = Field(default_factory=ImportSettings)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def is_development(self) -> bool:
        """是否开发环境"""
        return self.app_env.lower() in ("dev", "development")

    @property
    def is_production(self) -> bool:
        """是否生产环境"""
        return self.app_env.lower() in ("prod", "production")


@lru_cache
def get_config() -> AppSettings:
    """
    获取配置单例

    使用lru_cache确保全局只有一个配置实例
    """
    return AppSettings()


if __name__ == "__main__":
    from rich import print as rprint
    from rich.table import Table

    cfg = get_config()

    table = Table(title="CovidTrack Configuration", show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("App Name", cfg.app_name)
    table.add_row("Version", cfg.version)
    table.add_row("Environment", cfg.app_env)
    table.add_row("Log Level", cfg.log_level)
    table.add_row("Log File", str(cfg.log_dir / "covidtrack.log") if cfg.log_to_file else "-")
    table.add_row("", "")
    table.add_row("Confirmed", cfg.sources.confirmed_url)
    table.add_row("Deaths", cfg.sources.deaths_url)
    table.add_row("Recovered", cfg.sources.recovered_url or "-")
    table.add_row("", "")
    table.add_row("Max Days", str(cfg.importer.max_days_to_import))
    table.add_row("Province Policy", cfg.importer.province_policy)
    table.add_row("Fetch Timeout", f"{cfg.importer.fetch_timeout:.0f}s")
    table.add_row("Retry Failed Load", "✓" if cfg.importer.retry_failed_load else "✗")

    rprint(table)
    rprint("\n[green]✓[/green] Configuration loaded successfully!")
