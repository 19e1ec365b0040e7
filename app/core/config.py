# app/core/config.py
# 應用程式設定 (資料庫連線字串、API 前綴、CORS、逾時等)
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 服務名稱與版本 (顯示於 /health)
    APP_NAME: str = "FedLearn Notification Service"
    APP_VERSION: str = "1.0.0"

    # 資料庫設定 (預設使用本機 SQLite)
    DATABASE_URL: str = "sqlite+aiosqlite:///./fedlearn.db"
    # 設為 True 會在 console 印出 SQL 語句
    DB_ECHO: bool = False

    # 所有資源路由掛載的前綴
    API_PREFIX: str = "/api"
    # 允許的跨來源 (生產環境應限制)
    CORS_ORIGINS: List[str] = ["*"]

    # 每次資料庫操作的上限秒數
    STORE_TIMEOUT_SECONDS: float = 10.0

    LOG_LEVEL: str = "INFO"

    # 環境變數檔案
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
