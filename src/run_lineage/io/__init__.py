# src/run_lineage/io/__init__.py
"""
Operações de I/O que podem ser observadas pelo rastreamento.

Os módulos deste pacote contêm implementações reais (sem rastreamento)
e funções de instalação que as colocam sob observação via patch:

    - image   → write_image / read_image (numpy + Pillow)
    - tabular → pandas.read_csv, DataFrame.to_csv, DataFrame.to_json

Os patches alteram o atributo no módulo ou classe de origem; código que
guardou uma referência direta à função antes da instalação continua
chamando a versão não observada.
"""
