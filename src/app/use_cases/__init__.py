"""
Use Cases

Organized into domain folders:
- tenants/: Tenant administration (provision, status, destroy)
- orders/: Order fulfillment bound to a tenant scope

Import from subdirectories.
"""
