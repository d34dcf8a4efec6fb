from pathlib import Path


class SyncAppError(Exception):
    """Base user-facing application error."""


class SyncFileError(SyncAppError):
    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{message}: {path}")


class MissingConfigFileError(SyncFileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path=path, message="Config not found, run 'sr init' first")


class InvalidJsonFormatError(SyncFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid JSON format ({detail})")


class InvalidConfigSchemaError(SyncFileError):
    def __init__(self, path: Path, detail: str) -> None:
        self.detail = detail
        super().__init__(path=path, message=f"Invalid config schema ({detail})")


class RuleParseError(SyncAppError):
    def __init__(self, source_path: str, detail: str) -> None:
        self.source_path = source_path
        self.detail = detail
        super().__init__(f"Malformed frontmatter ({detail}): {source_path}")


class RegistryError(SyncAppError):
    """Registry could not be reached or returned unusable data."""


class InvalidRegistryUrlError(RegistryError):
    def __init__(self, url: str, kind: str) -> None:
        self.url = url
        super().__init__(f"Invalid {kind} registry URL: {url}")


class UnknownRegistryTypeError(RegistryError):
    def __init__(self, registry_type: str) -> None:
        self.registry_type = registry_type
        super().__init__(f"Unknown registry type: {registry_type}")


class RegistryRequestError(RegistryError):
    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Request failed ({detail}): {url}")


class RegistryUnavailableError(RegistryError):
    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Registry not available: {location}")


class CategoryFetchError(RegistryError):
    def __init__(self, category: str, detail: str) -> None:
        self.category = category
        self.detail = detail
        super().__init__(f"Failed to fetch category {category} ({detail})")
