from typing import Dict, Type

from techjobs.adapters.base import JobPortalAdapter
from techjobs.adapters.brightnetwork import BrightNetworkAdapter
from techjobs.adapters.gradcracker import GradcrackerAdapter
from techjobs.adapters.indeed import IndeedAdapter
from techjobs.adapters.linkedin import LinkedInAdapter
from techjobs.adapters.ratemyplacement import RateMyPlacementAdapter
from techjobs.core.models import Source

# Enumeration order here is the persisting order of an ingestion run.
ADAPTERS: Dict[Source, Type[JobPortalAdapter]] = {
    Source.BRIGHT_NETWORK: BrightNetworkAdapter,
    Source.GRADCRACKER: GradcrackerAdapter,
    Source.INDEED: IndeedAdapter,
    Source.LINKEDIN: LinkedInAdapter,
    Source.RATE_MY_PLACEMENT: RateMyPlacementAdapter,
}
