"""Code shared by the paybot core and services."""
