"""Application layer – bus, sink, table mapping, writer ports, provisioning."""
