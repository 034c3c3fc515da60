# 📄 File: app/modules/shared_garden/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Defines how shared gardens and partner wallets are stored in the database tables.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models: one row per couple holding the garden document as JSON with an
# integer version used for compare-and-set commits, and one row per user wallet.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - app.shared.infrastructure.database.connection (declarative Base)
#
# 🔄 Connected Modules / Calls From:
# - garden_store_impl.py (reads and compare-and-set writes)
# - migrations/env.py and migrations/versions/001_shared_garden_tables.py

"""
SQLAlchemy Models for the Shared Garden

Models:
- GardenDocumentModel: the whole garden document per couple key, versioned
- WalletModel: gold and water drops per user

The document column is opaque JSON; queries never reach inside it. All
concurrency control happens on the `version` column.
"""

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    func,
)

from app.shared.infrastructure.database.connection import Base


# =============================================================================
# GARDEN DOCUMENT MODEL
# =============================================================================

class GardenDocumentModel(Base):
    """
    One shared garden per couple.

    `version` starts at 1 and increases by exactly one per committed update.
    """
    __tablename__ = "garden_documents"

    couple_key = Column(
        String(255),
        primary_key=True,
        nullable=False,
        comment="Sorted user ids joined with an underscore"
    )
    user1_id = Column(String(128), nullable=False, index=True, comment="Lexicographically first partner")
    user2_id = Column(String(128), nullable=False, index=True, comment="Lexicographically second partner")
    document = Column(JSON, nullable=False, comment="Serialized GardenState")
    version = Column(Integer, nullable=False, default=1, comment="Optimistic concurrency version")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        comment="Garden creation time"
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        comment="Last committed update"
    )

    __table_args__ = (
        CheckConstraint("version >= 1", name="ck_garden_documents_version"),
    )

    def __repr__(self) -> str:
        return f"<GardenDocumentModel(couple_key={self.couple_key}, version={self.version})>"


# =============================================================================
# WALLET MODEL
# =============================================================================

class WalletModel(Base):
    """
    Per-user currency balances.

    A wallet is shared by every garden its owner belongs to, so it is versioned
    independently of any one garden document.
    """
    __tablename__ = "garden_wallets"

    user_id = Column(String(128), primary_key=True, nullable=False, comment="Opaque user id")
    gold = Column(Integer, nullable=False, default=0, comment="Gold balance")
    water = Column(Integer, nullable=False, default=0, comment="Water drops")
    max_water = Column(Integer, nullable=False, default=3, comment="Water drop capacity")
    last_water_earned_day_key = Column(String(10), nullable=True, comment="Day bucket of the last earned drop")
    version = Column(Integer, nullable=False, default=1, comment="Optimistic concurrency version")
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        comment="Last balance change"
    )

    __table_args__ = (
        CheckConstraint("gold >= 0", name="ck_garden_wallets_gold"),
        CheckConstraint("water >= 0", name="ck_garden_wallets_water"),
        CheckConstraint("max_water <= 3", name="ck_garden_wallets_max_water"),
        CheckConstraint("version >= 1", name="ck_garden_wallets_version"),
    )

    def __repr__(self) -> str:
        return f"<WalletModel(user_id={self.user_id}, gold={self.gold}, version={self.version})>"
