#!/usr/bin/env python3
"""Create DynamoDB tables for local development.

This script creates the three DynamoDB tables used by City Atlas, configured
against DynamoDB Local: Locations (with pincode and region GSIs), Sites and
Regions. Table names come from the same environment variables the Lambdas read.

Usage:
    python scripts/create_local_tables.py
"""

import sys
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

# Add src to path for config import
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.config import get_config
from core.stores.dynamo import PINCODE_INDEX, REGION_INDEX


def _create(dynamodb, table_name, **kwargs):
    try:
        dynamodb.create_table(TableName=table_name, BillingMode="PAY_PER_REQUEST", **kwargs)
        print(f"✓ Created {table_name} table")
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            print(f"✓ {table_name} table already exists")
        else:
            raise


def create_locations_table(dynamodb, table_name):
    """Create Locations table with pincode and region GSIs."""
    _create(
        dynamodb,
        table_name,
        KeySchema=[{"AttributeName": "locationId", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "locationId", "AttributeType": "S"},
            {"AttributeName": "pincode", "AttributeType": "S"},
            {"AttributeName": "regionId", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": PINCODE_INDEX,
                "KeySchema": [{"AttributeName": "pincode", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": REGION_INDEX,
                "KeySchema": [{"AttributeName": "regionId", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )


def create_sites_table(dynamodb, table_name):
    _create(
        dynamodb,
        table_name,
        KeySchema=[{"AttributeName": "siteId", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "siteId", "AttributeType": "S"}],
    )


def create_regions_table(dynamodb, table_name):
    _create(
        dynamodb,
        table_name,
        KeySchema=[{"AttributeName": "regionId", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "regionId", "AttributeType": "S"}],
    )


def main():
    """Create all DynamoDB tables."""
    config = get_config()

    endpoint_url = config.dynamodb_endpoint or "http://localhost:8000"

    print(f"Creating DynamoDB tables at {endpoint_url}...")
    print()

    # For DynamoDB Local, use dummy credentials
    dynamodb = boto3.client(
        "dynamodb",
        endpoint_url=endpoint_url,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )

    create_locations_table(dynamodb, config.locations_table)
    create_sites_table(dynamodb, config.sites_table)
    create_regions_table(dynamodb, config.regions_table)

    print()
    print("✅ All DynamoDB tables ready")


if __name__ == "__main__":
    main()
