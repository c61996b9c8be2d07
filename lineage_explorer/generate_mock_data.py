#!/usr/bin/env python3
"""
Generate mock datasets for testing the Lineage Explorer.

Creates a small enterprise data platform with realistic relationships:
- sample_data/lineage_sample.json - components + edges as JSON
- sample_data/lineage_sample.xlsx - Components and Edges sheets
- sample_data/lineage_sample_csv/ - components.csv and edges.csv

The graph runs databases -> tables -> stored procedures -> ETL activities
-> views -> Power BI visuals, plus 50 extra tables fed by one view for
testing large levels.
"""

import argparse
import json
import random
from pathlib import Path

import pandas as pd

# Output directory
OUTPUT_DIR = Path(__file__).parent / "sample_data"

BILLING_ENDPOINT = "prod-sql-server.database.windows.net"
ANALYTICS_ENDPOINT = "analytics-prod.database.windows.net"
ADF_ENDPOINT = "adf-prod.westus2.azuredatafactory.net"
POWERBI_ENDPOINT = "app.powerbi.com"

ADDITIONAL_TABLE_COUNT = 50


# =============================================================================
# Components
# =============================================================================

def _component(id, name, type, datatype=None, database=None, endpoint=None,
               environment="production", **extra) -> dict:
    record = {
        "id": id,
        "name": name,
        "type": type,
        "datatype": datatype,
        "database": database,
        "endpoint": endpoint,
        "environment": environment,
    }
    record.update(extra)
    return record


BILLING_FAILURE = {
    "pipelineName": "Daily-Billing-ETL",
    "failureTime": "2024-01-15 08:30:00",
    "failureCount": 3,
    "status": "Failed",
}


def build_sample_components() -> list:
    """Component records (camelCase keys, as exported by the platform catalog)."""
    components = [
        # Databases
        _component("db_billing_prod", "M365BillingSystem-Prod", "database",
                   database="M365BillingSystem", endpoint=BILLING_ENDPOINT),
        _component("db_analytics_prod", "Analytics-DataWarehouse", "database",
                   database="AnalyticsWarehouse", endpoint=ANALYTICS_ENDPOINT),
        _component("db_customer_test", "CustomerData-Test", "database",
                   database="CustomerData", endpoint="spo-ba-test.database.windows.net",
                   environment="pre-production"),

        # Tables
        _component("tbl_users", "Users", "table", "Table", "M365BillingSystem", BILLING_ENDPOINT),
        _component("tbl_billing_history", "BillingHistory", "table", "Table",
                   "M365BillingSystem", BILLING_ENDPOINT,
                   hasFailed=True, failureDetails=dict(BILLING_FAILURE)),
        _component("tbl_subscriptions", "Subscriptions", "table", "Table",
                   "M365BillingSystem", BILLING_ENDPOINT),

        # Views
        _component("view_customer_metrics", "CustomerMetrics_View", "view", "View",
                   "AnalyticsWarehouse", ANALYTICS_ENDPOINT),
        _component("view_revenue_summary", "RevenueSummary_View", "view", "View",
                   "AnalyticsWarehouse", ANALYTICS_ENDPOINT),

        # Stored procedures
        _component("sp_calculate_billing", "SP_CalculateMonthlyBilling", "stored_procedure",
                   "StoredProcedure", "M365BillingSystem", BILLING_ENDPOINT),
        _component("sp_update_metrics", "SP_UpdateCustomerMetrics", "stored_procedure",
                   "StoredProcedure", "AnalyticsWarehouse", ANALYTICS_ENDPOINT),

        # Activities / ETL
        _component("act_billing_etl", "Daily-Billing-ETL", "activity", "DataFlow",
                   "DataFactory", ADF_ENDPOINT,
                   hasFailed=True, failureDetails=dict(BILLING_FAILURE)),
        _component("act_customer_sync", "Customer-Data-Sync", "activity", "DataFlow",
                   "DataFactory", ADF_ENDPOINT),

        # Power BI visuals
        _component("pbi_revenue_card", "Total Revenue Card", "power_bi_chart", "Card",
                   "PowerBI", POWERBI_ENDPOINT, dashboardName="Executive Dashboard",
                   pageName="Revenue Overview", chartType="Card"),
        _component("pbi_customer_table", "Top Customers Table", "power_bi_chart", "Table",
                   "PowerBI", POWERBI_ENDPOINT, dashboardName="Executive Dashboard",
                   pageName="Customer Analytics", chartType="Table"),
        _component("pbi_trend_visual", "Revenue Trend Visual", "power_bi_chart", "LineChart",
                   "PowerBI", POWERBI_ENDPOINT, dashboardName="Executive Dashboard",
                   pageName="Revenue Overview", chartType="LineChart"),
    ]

    # Additional tables for testing large levels
    for i in range(ADDITIONAL_TABLE_COUNT):
        components.append(_component(
            f"additional_table_{i}", f"AdditionalTable_{i}", "table", "Table",
            "AnalyticsWarehouse", ANALYTICS_ENDPOINT))

    return components


# =============================================================================
# Edges
# =============================================================================

def _edge(id, source, target, label, type) -> dict:
    return {"id": id, "source": source, "target": target, "label": label, "type": type}


def build_sample_edges() -> list:
    """Edge records for the sample components."""
    edges = [
        # Database to tables
        _edge("e1", "db_billing_prod", "tbl_users", "contains", "references"),
        _edge("e2", "db_billing_prod", "tbl_billing_history", "contains", "references"),
        _edge("e3", "db_billing_prod", "tbl_subscriptions", "contains", "references"),

        # Tables to stored procedures
        _edge("e4", "tbl_users", "sp_calculate_billing", "reads", "reads"),
        _edge("e5", "tbl_subscriptions", "sp_calculate_billing", "reads", "reads"),
        _edge("e6", "sp_calculate_billing", "tbl_billing_history", "writes", "writes"),

        # Activities / ETL
        _edge("e7", "tbl_billing_history", "act_billing_etl", "reads", "reads"),
        _edge("e8", "tbl_users", "act_customer_sync", "reads", "reads"),

        # ETL to views
        _edge("e9", "act_billing_etl", "view_revenue_summary", "populates", "writes"),
        _edge("e10", "act_customer_sync", "view_customer_metrics", "populates", "writes"),

        # Views to Power BI
        _edge("e11", "view_revenue_summary", "pbi_revenue_card", "feeds", "reads"),
        _edge("e12", "view_revenue_summary", "pbi_trend_visual", "feeds", "reads"),
        _edge("e13", "view_customer_metrics", "pbi_customer_table", "feeds", "reads"),
    ]

    for i in range(ADDITIONAL_TABLE_COUNT):
        edges.append(_edge(f"additional_edge_{i}", "view_customer_metrics",
                           f"additional_table_{i}", "feeds", "reads"))

    return edges


def build_sample_dataset() -> dict:
    return {"components": build_sample_components(), "edges": build_sample_edges()}


# =============================================================================
# Large graphs for performance testing
# =============================================================================

LAYER_TYPES = ["database", "table", "stored_procedure", "activity", "view", "power_bi_chart"]
EDGE_TYPES_BY_TARGET = {
    "table": "references",
    "stored_procedure": "reads",
    "activity": "reads",
    "view": "writes",
    "power_bi_chart": "reads",
}


def generate_large_dataset(component_count: int = 2000, seed: int = 42) -> dict:
    """
    Layered random graph: each component reads from 1-3 components of the
    previous layer, with a few back-edges so cycles are exercised too.
    """
    rng = random.Random(seed)  # Reproducible results

    per_layer = max(1, component_count // len(LAYER_TYPES))
    layers = []
    components = []
    for type_name in LAYER_TYPES:
        layer = []
        for i in range(per_layer):
            cid = f"{type_name}_{i}"
            environment = "pre-production" if rng.random() < 0.1 else "production"
            extra = {}
            if rng.random() < 0.05:
                extra = {"hasFailed": True, "failureDetails": {
                    "pipelineName": f"pipeline_{rng.randint(1, 40)}",
                    "failureTime": f"2024-01-{rng.randint(1, 28):02d} 0{rng.randint(0, 9)}:00:00",
                    "failureCount": rng.randint(1, 5),
                    "status": "Failed",
                }}
            components.append(_component(cid, cid.replace("_", " ").title(), type_name,
                                         environment=environment, **extra))
            layer.append(cid)
        layers.append(layer)

    edges = []
    for depth in range(1, len(layers)):
        target_type = LAYER_TYPES[depth]
        for target in layers[depth]:
            for source in rng.sample(layers[depth - 1], min(len(layers[depth - 1]), rng.randint(1, 3))):
                edges.append(_edge(f"e{len(edges)}", source, target,
                                   EDGE_TYPES_BY_TARGET[target_type], EDGE_TYPES_BY_TARGET[target_type]))

    # Back-edges (e.g. a procedure writing into a table it reads)
    for _ in range(per_layer // 10):
        depth = rng.randint(2, len(layers) - 1)
        source = rng.choice(layers[depth])
        target = rng.choice(layers[depth - 1])
        edges.append(_edge(f"e{len(edges)}", source, target, "writes", "writes"))

    return {"components": components, "edges": edges}


# =============================================================================
# Writers
# =============================================================================

def _flatten(record: dict) -> dict:
    """camelCase JSON record -> flat spreadsheet row."""
    row = {k: v for k, v in record.items() if k != "failureDetails"}
    failure = record.get("failureDetails")
    if failure:
        row["pipeline_name"] = failure["pipelineName"]
        row["failure_time"] = failure["failureTime"]
        row["failure_count"] = failure["failureCount"]
        row["failure_status"] = failure["status"]
    return row


def write_dataset(dataset: dict, output_dir: Path, stem: str = "lineage_sample") -> list:
    """Write a dataset as JSON, Excel and CSV. Returns created paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    created = []

    json_path = output_dir / f"{stem}.json"
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(dataset, f, indent=2)
    created.append(json_path)

    components_df = pd.DataFrame([_flatten(c) for c in dataset["components"]])
    edges_df = pd.DataFrame(dataset["edges"])

    xlsx_path = output_dir / f"{stem}.xlsx"
    with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
        components_df.to_excel(writer, sheet_name="Components", index=False)
        edges_df.to_excel(writer, sheet_name="Edges", index=False)
    created.append(xlsx_path)

    csv_dir = output_dir / f"{stem}_csv"
    csv_dir.mkdir(exist_ok=True)
    components_df.to_csv(csv_dir / "components.csv", index=False)
    edges_df.to_csv(csv_dir / "edges.csv", index=False)
    created.append(csv_dir)

    for path in created:
        print(f"Created: {path}")
    return created


def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate mock data for Lineage Explorer")
    parser.add_argument('--size', choices=['small', 'large'], default='small',
                        help='Data size: small (~65 components) or large (~2000 components)')
    parser.add_argument('--count', type=int, default=2000,
                        help='Component count for --size large (default: 2000)')
    parser.add_argument('--output', type=Path, default=OUTPUT_DIR,
                        help='Output directory (default: sample_data)')

    args = parser.parse_args(argv)

    print("Generating mock data for Lineage Explorer...\n")

    if args.size == 'large':
        dataset = generate_large_dataset(args.count)
        write_dataset(dataset, args.output, stem=f"lineage_large_{args.count}")
    else:
        dataset = build_sample_dataset()
        write_dataset(dataset, args.output)

    print(f"\n=== Statistics ===")
    print(f"Components: {len(dataset['components'])}")
    print(f"Edges: {len(dataset['edges'])}")
    print("\nDone! Files created in:", args.output)
    return 0


if __name__ == "__main__":
    main()
