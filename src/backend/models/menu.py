# src/backend/models/menu.py
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String, Text, false, text, true

from src.backend.utils.database import Base
from src.backend.utils.timezone import now_local

# sqlite only auto-increments an INTEGER PRIMARY KEY
MenuPK = BigInteger().with_variant(Integer, "sqlite")


class Menu(Base):
    __tablename__ = "menus"

    id         = Column(MenuPK, primary_key=True, autoincrement=True)
    label      = Column(String(100), nullable=False)
    slug       = Column(String(150), nullable=True)
    to         = Column(String(255), nullable=True)
    icon       = Column(String(100), nullable=True)
    parent_id  = Column(MenuPK, nullable=True, index=True)            # NULL = root; no FK cascade
    position   = Column(String(20), nullable=False, index=True)       # header | sidebar | footer
    order      = Column(Integer, nullable=False, default=0, server_default=text("0"))
    is_active  = Column(Boolean, nullable=False, default=True, server_default=true())
    is_fixed   = Column(Boolean, nullable=False, default=False, server_default=false())
    roles      = Column(Text, nullable=False, default="[]")  # JSON array of role names
    created_at = Column(DateTime(timezone=True), default=now_local, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_local, onupdate=now_local, nullable=False)

    def __repr__(self) -> str:
        return f"<Menu id={self.id} position={self.position} parent_id={self.parent_id} label={self.label!r}>"
