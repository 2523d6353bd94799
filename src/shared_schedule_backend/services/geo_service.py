import httpx # Using httpx for async requests
from ..common.logger import log

class GeoService:
    """
    Service to guess a new owner's time zone from their IP address.
    Uses ip-api.com; any failure simply yields None so signup can fall back
    to the configured default zone.
    """
    IP_API_URL = "http://ip-api.com/json/"
    TIMEOUT_SECONDS = 5.0

    async def get_timezone(self, ip_address: str | None) -> str | None:
        """
        Returns the IANA time zone for an IP address, or None if it cannot be determined.
        """
        if not ip_address:
            return None

        log.info(f"Fetching geolocation for IP: {ip_address}")
        try:
            async with httpx.AsyncClient(timeout=self.TIMEOUT_SECONDS) as client:
                response = await client.get(f"{self.IP_API_URL}{ip_address}", params={"fields": "status,message,timezone"})
                response.raise_for_status()
                data = response.json()
        except httpx.RequestError as e:
            log.error(f"HTTP request failed for geolocation service for IP {ip_address}: {e}", exc_info=True)
            return None
        except httpx.HTTPStatusError as e:
            log.error(f"Geolocation service returned an error for IP {ip_address}: {e.response.status_code} - {e.response.text}")
            return None

        if data.get("status") == "fail":
            log.warning(f"Geolocation lookup failed for IP {ip_address}: {data.get('message', 'Unknown error')}")
            return None

        timezone = data.get("timezone")
        if not timezone:
            log.warning(f"Incomplete geolocation data for IP {ip_address}: {data}.")
            return None

        log.info(f"Geolocation successful for IP {ip_address}: Timezone={timezone}")
        return timezone
