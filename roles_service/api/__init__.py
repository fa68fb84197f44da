"""HTTP and RPC presentation layer."""
