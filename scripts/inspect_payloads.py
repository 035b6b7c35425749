"""Script to inspect discovery results and raw API payloads for debugging."""
import asyncio
import json
import logging
import sys
from admin_cache.config import settings
from admin_cache.models.schemas import DataSetKey
from admin_cache.services.cloud_controller import CloudControllerClient
from admin_cache.services.discovery import Discovery


async def inspect_data_set(client: CloudControllerClient, name: str):
    """Run one discovery and display its result."""
    print(f"\n=== Discovery: {name} ===")
    result = await Discovery(client).fetcher_for(DataSetKey(name))()
    print(json.dumps(result.model_dump(), indent=2))
    if not result.connected:
        print("Discovery failed, rerun with LOG_LEVEL=DEBUG for details")


async def inspect_raw(client: CloudControllerClient, api: str, path: str):
    """Walk every page of a collection and display the raw resources."""
    print(f"\n=== Raw {api}: {path} ===")
    if api == "cc":
        resources = await client.get_cc(path)
    else:
        resources = await client.get_uaa(path)
    print(json.dumps(resources, indent=2))


async def main():
    """Main inspection function."""
    keys = ", ".join(key.value for key in DataSetKey)
    if len(sys.argv) < 2:
        print("Usage:")
        print("  Data set:   python inspect_payloads.py data-set <key>")
        print(f"              keys: {keys}")
        print("  Raw CC:     python inspect_payloads.py cc <path>     e.g. v2/apps")
        print("  Raw UAA:    python inspect_payloads.py uaa <path>    e.g. Users")
        sys.exit(1)

    command = sys.argv[1]
    client = CloudControllerClient()

    if command == "data-set" and len(sys.argv) >= 3 and sys.argv[2] in {key.value for key in DataSetKey}:
        await inspect_data_set(client, sys.argv[2])
    elif command in ("cc", "uaa") and len(sys.argv) >= 3:
        await inspect_raw(client, command, sys.argv[2])
    else:
        print("Invalid command or missing arguments")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=settings.log_level)
    asyncio.run(main())
