# 📄 File: app/modules/shared_garden/__init__.py
# 🧭 Purpose (Layman Explanation):
# The shared garden feature: one garden per couple that both partners look after together.
# 🧪 Purpose (Technical Summary):
# Shared garden module following the layered layout (domain, application,
# infrastructure, presentation). Nothing is imported eagerly here so that settings can
# depend on the domain rule model without import cycles.
# 🔗 Dependencies:
# None (package initialization)
# 🔄 Connected Modules / Calls From:
# app.api.v1.router, app.main, app.shared.config.settings (GardenRules)

"""
Shared Garden Module

Layers:
- domain: garden document, wallets, rules and the pure services that mutate them
- application: SharedGardenEngine, CQRS commands/handlers, DTOs, dev tools
- infrastructure: SQLAlchemy and in-memory stores, change feeds
- presentation: FastAPI router, schemas and dependencies
"""
