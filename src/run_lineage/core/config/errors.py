# src/run_lineage/core/config/errors.py
"""
Erros da camada de configuração.

Ao contrário das falhas de captura (que viram diagnóstico), um erro de
configuração impede a criação do coordenador. Todos herdam de
`ConfigError`, de modo que o chamador pode tratá-los em um único ponto.
"""


class ConfigError(Exception):
    """Base dos erros de configuração; também usada para valores inválidos."""


class DefaultsNotFoundError(ConfigError):
    """O arquivo de defaults informado explicitamente não existe."""


class UnsupportedConfigFormatError(ConfigError):
    """Extensão sem parser (aceitas: `.yaml`, `.yml`, `.json`)."""


class InvalidConfigRootTypeError(ConfigError):
    """O documento carregado não tem um mapa na raiz."""


class ConfigTypeConflictError(ConfigError):
    """
    Override com tipo incompatível com o defaults.

    Exemplo: defaults `capture: {strict: false}` e override `capture: off`.
    """
