from typing import Optional, Any, Dict

from sqlalchemy import select

from database.models import MatchEngineConfig
from database.repositories.base import BaseRepository


class EngineConfigRepository(BaseRepository):
    def get_for_tenant(self, tenant_id: Any) -> Optional[MatchEngineConfig]:
        stmt = select(MatchEngineConfig).where(MatchEngineConfig.tenant_id == tenant_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def upsert(self, tenant_id: Any, values: Dict[str, Any]) -> MatchEngineConfig:
        config = self.get_for_tenant(tenant_id)
        if config is None:
            config = MatchEngineConfig(tenant_id=tenant_id)
            self.db.add(config)
        for key, value in values.items():
            setattr(config, key, value)
        self.db.flush()
        return config
