"""
connectors: provider capability records for the connect hub.

Each provider (Meta, Google, …) is a subclass of BaseProvider that names
itself and its resource collection; every remote path is derived from
that, so one generic connection state machine serves all of them.
"""
