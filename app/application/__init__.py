"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (identity provider, document store).
"""
