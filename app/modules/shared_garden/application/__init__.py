# 📄 File: app/modules/shared_garden/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# Where partner requests are turned into garden changes.
# 🧪 Purpose (Technical Summary):
# Application layer: SharedGardenEngine façade, CQRS commands and handlers, read DTOs
# and the feature-flagged developer tools.
# 🔗 Dependencies:
# Domain layer, GardenStore
# 🔄 Connected Modules / Calls From:
# Presentation layer, tests
