# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fusebroker/fuse/catalog.py
from __future__ import annotations

from typing import List

from fusebroker.broker.models import Service, ServicePlan

PLAN_ID = "fuse-plan-id"

PROVISION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "object",
    "properties": {
        "limit": {
            "type": "integer",
            "minimum": 0,
            "title": "Integrations limit",
            "description": "Maximum number of integrations that can run at once (0 means no limit)",
            "default": 0,
        }
    },
}


def catalog_services(service_id: str) -> List[Service]:
    return [
        Service(
            id=service_id,
            name="fuse",
            description="Integration Platform",
            bindable=False,
            plan_updatable=False,
            tags=["fuse", "integration"],
            metadata={
                "serviceName": "fuse",
                "displayName": "Fuse Online",
                "documentationUrl": "https://access.redhat.com/documentation/en-us/red_hat_fuse/",
                "providerDisplayName": "Red Hat",
                "imageUrl": "https://raw.githubusercontent.com/syndesisio/syndesis/master/app/ui-react/packages/ui/public/favicon.png",
            },
            plans=[
                ServicePlan(
                    id=PLAN_ID,
                    name="default-fuse",
                    description="Fuse Online instance in its own namespace",
                    free=True,
                    parameters_schema=PROVISION_SCHEMA,
                )
            ],
        )
    ]
