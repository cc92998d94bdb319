"""Application layer: ledger service, commands, DTOs and scenario replay."""
