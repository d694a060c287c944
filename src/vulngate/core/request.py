"""Scan request construction.

Packages the primary manifest and the supplementary manifests into one
ScanRequest for the scan client.
"""

from vulngate.core.manifests import split_primary
from vulngate.core.models import Manifest, ScanRequest


def build_scan_request(manifests: list[Manifest], org_name: str | None = None) -> ScanRequest:
    """Build a scan request from discovered manifests.

    Args:
        manifests: Ordered manifests; the first one becomes the target
        org_name: Optional organization, sent as a query parameter only

    Returns:
        ScanRequest with target content and ordered supplementary contents

    Raises:
        NoManifestsFound: If manifests is empty

    Example:
        >>> request = build_scan_request([Manifest("<project/>", "pom.xml")])
        >>> request.to_payload()
        {'encoding': 'plain', 'files': {'target': {'contents': '<project/>'}}}
    """
    primary, supplementary = split_primary(manifests)
    return ScanRequest(
        target=primary.content,
        additional=tuple(m.content for m in supplementary),
        org_name=org_name or None,
    )
