"""Config schema validation helpers."""


def validate_plugin_config(raw, known_checks=None):
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("plugin config must be a mapping")

    defaults = raw.get("defaults", {})
    if defaults is None:
        defaults = {}
    if not isinstance(defaults, dict):
        raise ValueError("defaults must be a mapping")

    checks = raw.get("checks", {})
    if checks is None:
        checks = {}
    if not isinstance(checks, dict):
        raise ValueError("checks must be a mapping of check name to options")

    for name, options in checks.items():
        if known_checks is not None and name not in known_checks:
            raise ValueError(f"unknown check in config: {name}")
        if options is not None and not isinstance(options, dict):
            raise ValueError(f"options for {name} must be a mapping")

    return {
        "defaults": defaults,
        "checks": {name: options or {} for name, options in checks.items()},
    }
