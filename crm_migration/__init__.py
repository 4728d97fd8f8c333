"""
CRM Migration Dry-Run Engine

Previews an import from an external trade-service CRM without writing
anything to the internal store.

Supports:
- JobNimbus and AccuLynx as source systems
- Normalization of provider-specific contact/job shapes
- Tiered duplicate detection (email, phone, address)
- Field completeness validation
- Sample field mappings, duration estimates and recommendations
"""

__version__ = "0.1.0"
