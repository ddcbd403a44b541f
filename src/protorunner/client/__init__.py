"""
Clients for the catalog and execution services.

Examples
--------
```python
async with ProtocolClient("http://localhost:8000") as client:
    protocols = await client.list_protocols()
```
"""

from .client import ProtocolClient, error_detail

__all__ = ["ProtocolClient", "error_detail"]
