"""Compiled-in default alias schemas and mock seed rows.

The defaults describe the integration aliases served by the gateway:

    Z10 platforms, Z11 shipping programs, Z00 marketplace accounts,
    Z01 product x account bindings, Z02 integrated orders, Z03/Z05/Z06
    integrated order children (items, payments, invoices), Z04 processing logs.

SA1 (customers) only exists as a lookup source and has no schema.
"""

# flake8: noqa: E501

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from apps.api.models.pydantic.dictionary import AliasSchema, FieldDescriptor

ACTIVE_OPTIONS = [{"value": "S", "label": "Ativo"}, {"value": "N", "label": "Inativo"}]


def today_ymd(now: Optional[datetime] = None) -> str:
    """Return the current UTC date as YYYYMMDD."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y%m%d")


def field(
    name: str,
    title: str,
    type_: str,
    size: int,
    required: bool,
    order: int,
    options: Optional[List[Dict[str, Any]]] = None,
    with_decimals: bool = False,
    editable: bool = True,
) -> FieldDescriptor:
    """Build a FieldDescriptor with the defaults shared by every seed column."""
    return FieldDescriptor(
        field=name,
        title=title,
        type=type_,
        size=size,
        required=required,
        editable=editable,
        enabled=True,
        virtual=False,
        options=options or [],
        decimals=2 if with_decimals else 0,
        exist_trigger=False,
        help="",
        order=order,
    )


def default_schemas() -> Dict[str, AliasSchema]:
    """Return a fresh copy of the default alias schemas keyed by alias code."""
    return {
        "Z10": AliasSchema(
            description="Plataformas",
            struct=[
                field("Z10_COD", "Codigo", "C", 15, True, 1),
                field("Z10_DESC", "Descricao", "C", 60, True, 2),
                field("Z10_ATIVO", "Ativo", "C", 1, True, 3, ACTIVE_OPTIONS),
                field("Z10_DTALT", "Ultima Atualizacao", "D", 8, False, 4, editable=False),
            ],
        ),
        "Z11": AliasSchema(
            description="Programas de Envio",
            struct=[
                field("Z11_COD", "Codigo", "C", 15, True, 1),
                field("Z11_DESC", "Descricao", "C", 60, True, 2),
                field("Z11_PRAZO", "Prazo em Dias", "N", 3, True, 3),
                field("Z11_ATIVO", "Ativo", "C", 1, True, 4, ACTIVE_OPTIONS),
            ],
        ),
        "Z00": AliasSchema(
            description="Contas de Marketplaces",
            struct=[
                field("Z00_COD", "Codigo", "C", 15, True, 1),
                field("Z00_DESC", "Descricao", "C", 60, True, 2),
                field("Z00_TOKEN", "Token", "C", 120, True, 3),
                field(
                    "Z00_STATUS",
                    "Status",
                    "C",
                    1,
                    True,
                    4,
                    [{"value": "A", "label": "Ativo"}, {"value": "I", "label": "Inativo"}],
                ),
            ],
        ),
        "Z01": AliasSchema(
            description="Produto x Conta",
            struct=[
                field("Z01_COD", "Codigo", "C", 6, False, 1, editable=False),
                field("Z01_PRDERP", "Produto ERP", "C", 20, True, 2),
                field("Z01_DESCER", "Descricao ERP", "C", 60, True, 3),
                field("Z01_CONTA", "Conta Marketplace", "C", 15, True, 4),
                field("Z01_SKU", "SKU Marketplace", "C", 30, True, 5),
                field("Z01_ATIVO", "Ativo", "C", 1, True, 6, ACTIVE_OPTIONS),
            ],
        ),
        "Z02": AliasSchema(
            description="Pedidos Integrados",
            struct=[
                field("Z02_COD", "Codigo", "C", 15, True, 1, editable=False),
                field("Z02_IDPED", "Id Pedido", "C", 25, True, 2),
                field("Z02_IDINT", "Id Integracao", "C", 25, True, 3),
                field("Z02_PEDIDO", "Pedido ERP", "C", 20, False, 4, editable=False),
                field("Z02_CLIENT", "Cliente", "C", 10, False, 5),
                field("Z02_LOJA", "Loja", "C", 4, False, 6),
                field(
                    "Z02_STATUS",
                    "Status",
                    "C",
                    10,
                    True,
                    7,
                    [
                        {"value": "NOVO", "label": "Novo"},
                        {"value": "PROC", "label": "Processando"},
                        {"value": "OK", "label": "Concluido"},
                        {"value": "ERRO", "label": "Erro"},
                    ],
                ),
                field("Z02_ULTATT", "Ultima Atualizacao", "D", 8, False, 8, editable=False),
            ],
        ),
        "Z03": AliasSchema(
            description="Itens Integrados",
            struct=[
                field("Z03_ITEM", "Item", "C", 4, True, 1),
                field("Z03_PROD", "Produto", "C", 20, True, 2),
                field("Z03_DESC", "Descricao", "C", 60, False, 3),
                field("Z03_QTD", "Quantidade", "N", 10, True, 4),
                field("Z03_VLR", "Valor", "N", 15, True, 5, with_decimals=True),
                field("Z03_IDPED", "Id Pedido", "C", 25, False, 6, editable=False),
                field("Z03_IDINT", "Id Integracao", "C", 25, False, 7, editable=False),
            ],
        ),
        "Z04": AliasSchema(
            description="Log de Integracao",
            struct=[
                field("Z04_COD", "Codigo", "C", 12, True, 1, editable=False),
                field("Z04_DTHORA", "Data Hora", "D", 8, True, 2, editable=False),
                field("Z04_TIPO", "Tipo", "C", 10, True, 3),
                field(
                    "Z04_STATUS",
                    "Status",
                    "C",
                    10,
                    True,
                    4,
                    [{"value": "OK", "label": "Sucesso"}, {"value": "FALHA", "label": "Falha"}],
                ),
                field("Z04_MSG", "Mensagem", "M", 200, False, 5, editable=False),
            ],
        ),
        "Z05": AliasSchema(
            description="Pagamentos",
            struct=[
                field("Z05_FORMA", "Forma", "C", 20, True, 1),
                field("Z05_VALOR", "Valor", "N", 15, True, 2, with_decimals=True),
                field("Z05_STATUS", "Status", "C", 12, True, 3),
                field("Z05_IDPED", "Id Pedido", "C", 25, False, 4, editable=False),
                field("Z05_IDINT", "Id Integracao", "C", 25, False, 5, editable=False),
            ],
        ),
        "Z06": AliasSchema(
            description="Faturamentos",
            struct=[
                field("Z06_DOC", "Documento", "C", 20, True, 1),
                field("Z06_SERIE", "Serie", "C", 6, True, 2),
                field("Z06_VALOR", "Valor", "N", 15, True, 3, with_decimals=True),
                field("Z06_STATUS", "Status", "C", 12, True, 4),
                field("Z06_IDPED", "Id Pedido", "C", 25, False, 5, editable=False),
                field("Z06_IDINT", "Id Integracao", "C", 25, False, 6, editable=False),
            ],
        ),
    }


def seed_rows(today: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Return a fresh copy of the mock dataset keyed by alias code."""
    today = today or today_ymd()
    return {
        "Z10": [
            {"Z10_COD": "PLAT001", "Z10_DESC": "Mercado Livre", "Z10_ATIVO": "S", "Z10_DTALT": today},
            {"Z10_COD": "PLAT002", "Z10_DESC": "Shopee", "Z10_ATIVO": "S", "Z10_DTALT": today},
        ],
        "Z11": [
            {"Z11_COD": "ENV001", "Z11_DESC": "Entrega Expressa", "Z11_PRAZO": 2, "Z11_ATIVO": "S"},
            {"Z11_COD": "ENV002", "Z11_DESC": "Entrega Economica", "Z11_PRAZO": 6, "Z11_ATIVO": "S"},
        ],
        "Z00": [
            {"Z00_COD": "ACC001", "Z00_DESC": "Conta Principal ML", "Z00_TOKEN": "token-ml-001", "Z00_STATUS": "A"},
            {"Z00_COD": "ACC002", "Z00_DESC": "Conta Shopee Sul", "Z00_TOKEN": "token-shp-002", "Z00_STATUS": "A"},
        ],
        "Z01": [
            {"Z01_COD": "1", "Z01_PRDERP": "PRD001", "Z01_DESCER": "Camisa Polo", "Z01_CONTA": "ACC001", "Z01_SKU": "SKU-ML-001", "Z01_ATIVO": "S"},
            {"Z01_COD": "2", "Z01_PRDERP": "PRD001", "Z01_DESCER": "Camisa Polo", "Z01_CONTA": "ACC002", "Z01_SKU": "SKU-SHP-044", "Z01_ATIVO": "S"},
            {"Z01_COD": "3", "Z01_PRDERP": "PRD002", "Z01_DESCER": "Tenis Esportivo", "Z01_CONTA": "ACC001", "Z01_SKU": "SKU-ML-777", "Z01_ATIVO": "S"},
        ],
        "Z02": [
            {
                "Z02_COD": "INT001",
                "Z02_IDPED": "PED-1001",
                "Z02_IDINT": "I1001",
                "Z02_PEDIDO": "4500012345",
                "Z02_CLIENT": "000001",
                "Z02_LOJA": "01",
                "Z02_STATUS": "PROC",
                "Z02_ULTATT": today,
            },
            {
                "Z02_COD": "INT002",
                "Z02_IDPED": "PED-1002",
                "Z02_IDINT": "I1002",
                "Z02_PEDIDO": "4500012346",
                "Z02_CLIENT": "000002",
                "Z02_LOJA": "01",
                "Z02_STATUS": "NOVO",
                "Z02_ULTATT": today,
            },
        ],
        "Z03": [
            {"Z03_ITEM": "001", "Z03_PROD": "PRD001", "Z03_DESC": "Camisa Polo", "Z03_QTD": 2, "Z03_VLR": 99.9, "Z03_IDPED": "PED-1001", "Z03_IDINT": "I1001"},
        ],
        "Z04": [
            {"Z04_COD": "LOG001", "Z04_DTHORA": today, "Z04_TIPO": "INFO", "Z04_STATUS": "OK", "Z04_MSG": "Integracao concluida"},
            {"Z04_COD": "LOG002", "Z04_DTHORA": today, "Z04_TIPO": "ERRO", "Z04_STATUS": "FALHA", "Z04_MSG": "Falha no envio para marketplace"},
        ],
        "Z05": [
            {"Z05_FORMA": "PIX", "Z05_VALOR": 199.8, "Z05_STATUS": "PAGO", "Z05_IDPED": "PED-1001", "Z05_IDINT": "I1001"},
        ],
        "Z06": [
            {"Z06_DOC": "NF001", "Z06_SERIE": "1", "Z06_VALOR": 199.8, "Z06_STATUS": "EMITIDO", "Z06_IDPED": "PED-1001", "Z06_IDINT": "I1001"},
        ],
        "SA1": [
            {"A1_COD": "000001", "A1_LOJA": "01", "A1_NOME": "Cliente Mock 1"},
            {"A1_COD": "000002", "A1_LOJA": "01", "A1_NOME": "Cliente Mock 2"},
            {"A1_COD": "000003", "A1_LOJA": "02", "A1_NOME": "Cliente Mock 3"},
        ],
    }
