"""Services that touch the network or the record store."""
