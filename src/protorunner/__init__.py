# -*- coding: utf-8 -*-
"""# protorunner

`Protocol catalog browser and run controller`

A (python) library and command line for browsing a catalog of device-control
protocols, filling in their parameters and running them against a simulator or
real hardware through a protocol execution service.

The package is organised as:

- `protorunner.types`: protocol, schema, result and notification types.
- `protorunner.form`: schema interpretation, control plan and form values.
- `protorunner.run`: run lifecycle state machine, progress ticker, result view.
- `protorunner.client`: HTTP client for the catalog and execution services.
- `protorunner.cli`: the `protorunner` command line.
- `protorunner.util`: logging, configuration and defaults.

Examples
--------
```python
import asyncio
from protorunner.client import ProtocolClient
from protorunner.form import ProtocolForm
from protorunner.run import RunController

async def main():
    async with ProtocolClient("http://localhost:8000") as client:
        protocol = await client.get_protocol("serial_dilution")
        form = ProtocolForm(protocol)
        form.set_raw("volume", "50")
        async with RunController(client, protocol.id) as ctl:
            state = await ctl.submit(form.submission())
            print(state.status, state.result)

asyncio.run(main())
```
"""

from ._version import __version__
