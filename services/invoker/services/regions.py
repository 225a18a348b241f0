"""
Region catalog backed by botocore's bundled endpoint data.
"""

from typing import Dict, Optional

import botocore.session

from ..models.spec import Region


class BotocoreRegionCatalog:
    def __init__(self, session: Optional[botocore.session.Session] = None):
        self.session = session or botocore.session.get_session()
        self._regions: Optional[Dict[str, Region]] = None

    def regions(self) -> Dict[str, Region]:
        if self._regions is None:
            endpoints = self.session.get_data("endpoints") or {}
            regions = {}
            for partition in endpoints.get("partitions", []):
                partition_name = partition.get("partition", "aws")
                for region_id, details in partition.get("regions", {}).items():
                    regions[region_id] = Region(
                        id=region_id,
                        name=(details or {}).get("description", region_id),
                        partition=partition_name,
                    )
            self._regions = regions
        return self._regions

    def lookup_by_id(self, region_id: str) -> Optional[Region]:
        return self.regions().get(region_id)
