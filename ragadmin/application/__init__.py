"""Application Layer - page-level workflow controllers."""
