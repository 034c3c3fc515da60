# 📄 File: app/modules/shared_garden/infrastructure/__init__.py
# 🧭 Purpose (Layman Explanation):
# Where gardens are actually stored and how changes are broadcast.
# 🧪 Purpose (Technical Summary):
# Infrastructure layer: SQLAlchemy GardenStoreImpl, InMemoryGardenStore and the
# Redis/local change feeds.
# 🔗 Dependencies:
# SQLAlchemy, redis
# 🔄 Connected Modules / Calls From:
# Presentation dependency wiring, tests
