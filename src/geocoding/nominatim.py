import requests
import time
import logging
import concurrent.futures
from threading import Lock

# Constants
NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"
USER_AGENT = "ParksCatalogImporter/1.0"
REQUEST_TIMEOUT = 10
RATE_LIMIT_DELAY = 1.1
MAX_RETRIES = 3

# Get logger
logger = logging.getLogger(__name__)

# Cache to minimize API calls for the same address
# Format: {address: (latitude, longitude) or None}
geocoding_cache = {}

# Add lock for thread-safe cache access
cache_lock = Lock()


def get_coordinates_for_address(address):
    """
    Look up (latitude, longitude) for a free-text address.

    Returns None when the address is empty, nothing matches, or every
    attempt fails.
    """
    if not address or not address.strip():
        return None

    cache_key = address.strip().lower()

    with cache_lock:
        if cache_key in geocoding_cache:
            return geocoding_cache[cache_key]

    retries = 0
    while retries < MAX_RETRIES:
        try:
            time.sleep(RATE_LIMIT_DELAY)

            params = {
                "q": address,
                "format": "json",
                "limit": 1,
            }

            headers = {
                "User-Agent": USER_AGENT
            }

            response = requests.get(
                NOMINATIM_SEARCH_URL,
                params=params,
                headers=headers,
                timeout=REQUEST_TIMEOUT
            )

            if response.status_code == 200:
                results = response.json()
                coordinates = None
                if results:
                    coordinates = (float(results[0]["lat"]), float(results[0]["lon"]))
                    logger.info(f"Successfully geocoded address '{address}'")
                else:
                    logger.warning(f"No coordinates found for address '{address}'")

                with cache_lock:
                    geocoding_cache[cache_key] = coordinates
                return coordinates

            retries += 1
            wait_time = RATE_LIMIT_DELAY * (retries + 1)
            logger.warning(f"Geocoding HTTP error ({response.status_code}) for address '{address}'. Retrying in {wait_time}s... (Attempt {retries}/{MAX_RETRIES})")
            time.sleep(wait_time)

        except requests.RequestException as e:
            retries += 1
            wait_time = RATE_LIMIT_DELAY * (retries + 1)
            logger.warning(f"Network error for address '{address}': {e}. Retrying in {wait_time}s... (Attempt {retries}/{MAX_RETRIES})")
            time.sleep(wait_time)
        except (ValueError, KeyError, IndexError) as e:
            logger.error(f"Unexpected geocoding response for address '{address}': {e}")
            return None

    logger.error(f"Failed to geocode address '{address}' after {MAX_RETRIES} attempts")
    return None


def batch_geocode(addresses, max_workers=4):
    results = {}
    success_count = 0
    failure_count = 0

    total = len(addresses)
    logger.info(f"Starting parallel batch geocoding for {total} addresses with {max_workers} workers")

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_address = {
            executor.submit(get_coordinates_for_address, address): address
            for address in addresses
        }

        for i, future in enumerate(concurrent.futures.as_completed(future_to_address)):
            address = future_to_address[future]
            try:
                coordinates = future.result()
            except Exception as e:
                logger.error(f"Error geocoding address '{address}': {str(e)}")
                coordinates = None

            results[address] = coordinates
            if coordinates:
                success_count += 1
            else:
                failure_count += 1

            # Log progress every 10 addresses or at the end
            if (i + 1) % 10 == 0 or (i + 1) == total:
                logger.info(f"Geocoding progress: {i+1}/{total} ({((i+1)/total*100):.1f}%)")

    if total > 0:
        success_rate = (success_count / total) * 100
        logger.info(f"Parallel batch geocoding completed: {success_rate:.1f}% success rate ({success_count}/{total})")

    return results
