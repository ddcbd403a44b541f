"""
Command-line interface for protorunner.

The CLI is a thin host around the core: it fetches protocols, builds a
`ProtocolForm` from the schema, feeds operator values through it and drives a
`RunController`, rendering everything with rich.

Examples
--------
Listing the catalog, filtered by a tag:
```bash
$ protorunner list --tag liquid-handling
```

Running a protocol in simulation mode:
```bash
$ protorunner run serial_dilution -p volume=50 -p mix=yes --simulate
```

Running on hardware and showing command 2's data:
```bash
$ protorunner run serial_dilution -p volume=50 --hardware --expand 2
```

CLI Tree
--------

```
$ protorunner --tree
cli
└── list
└── run
└── show
```
"""

from .base import cli, tree_option

__all__ = ["cli", "tree_option"]
