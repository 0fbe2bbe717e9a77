"""Built-in adapters, rules and legacy suites shipped with actkit."""
