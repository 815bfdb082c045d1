"""Domain layer: policy records, reconciliation and claim resolution."""
