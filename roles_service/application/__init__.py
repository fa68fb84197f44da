"""Application layer: DTOs, ports and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (store adapter, peer RPC clients).
"""
