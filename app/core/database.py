from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool
from app.core.config import settings

engine_kwargs = {
    "echo": settings.DB_ECHO,
}

if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite 連線不跨 event loop 共用，每次都開新的
    engine_kwargs["poolclass"] = NullPool
else:
    # 每次從連線池取連線前，先 PING 一次，確保連線有效
    engine_kwargs["pool_pre_ping"] = True

if "postgresql" in settings.DATABASE_URL:
    # PgBouncer (transaction mode) 不支援 prepared statement 快取
    engine_kwargs["connect_args"] = {"statement_cache_size": 0}

# 建立非同步引擎
engine = create_async_engine(settings.DATABASE_URL, **engine_kwargs)

# 建立非同步 Session
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# 建立 ORM Model 基底類別
Base = declarative_base()

# (重要) 取得 DB Session 的 Dependency
async def get_db() -> AsyncSession:
    """FastAPI Dependency: 取得非同步資料庫 session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
