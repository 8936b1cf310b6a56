"""Static analysis of deployment scripts and contract sources."""
