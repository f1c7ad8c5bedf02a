"""
On-chain interaction layer.

Provides an async JSON-RPC client, ABI loading and encoding, address
parsing and a read-only contract proxy.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
