# src/run_lineage/core/traceability/__init__.py
"""
Rastreabilidade persistida do Run Lineage.

Este pacote materializa uma run em um snapshot JSON determinístico
(o "data package" da execução): a Execution com sua tabela de objetos,
as arestas derivadas do grafo, o hash da configuração e o Event Log do
coordenador.

Limites explícitos:
    - Não emite formatos padronizados (PROV, ORE, BagIt)
    - Não publica em repositórios remotos
"""

from .package import (
    SCHEMA_VERSION,
    DataPackage,
    build_data_package,
    load_data_package,
    save_data_package,
)

__all__ = ["SCHEMA_VERSION", "DataPackage", "build_data_package", "load_data_package", "save_data_package"]
