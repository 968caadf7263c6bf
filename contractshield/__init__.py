"""ContractShield - contract analysis backend."""
