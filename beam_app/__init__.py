"""HTTP service and command line front ends for the BEAM checker."""
