"""
Integration Tests Package for the Parking Ledger

These tests drive complete billing timelines through the ledger aggregate,
the application service, the scenario runner and the command-line entry
point.
"""
