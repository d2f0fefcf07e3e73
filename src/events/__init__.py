"""
Events Module
=============

Bounded Context for the Keptn event bus.

Responsibilities:
- Receive CloudEvents over HTTP and route them by type
- Send started/finished events back to the Keptn event broker
- Read resources from the Keptn config repo
- Health and readiness endpoints
"""

__version__ = "0.1.0"
