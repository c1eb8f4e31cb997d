"""Activity ledger: records of what each actor changed."""
