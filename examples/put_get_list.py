"""
Write two keys in one transaction, read one back, then list the store.

    VSS_BASE_URL=http://localhost:8080/vss python examples/put_get_list.py
"""

from __future__ import annotations

import asyncio
import logging
import os

from vss_client import (ClientConfig, GetObjectRequest, KeyValue,
                        PutObjectRequest, SigsAuthProvider, VssClient)


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    config = ClientConfig.from_env()
    auth = SigsAuthProvider.from_secret_bytes(os.urandom(32))
    store_id = "example-store"

    async with VssClient.from_config(config, header_provider=auth) as vss:
        await vss.put_object(
            PutObjectRequest(
                store_id=store_id,
                transaction_items=[
                    KeyValue(key="alpha", version=0, value=b"first"),
                    KeyValue(key="beta", version=0, value=b"second"),
                ],
            )
        )
        resp = await vss.get_object(GetObjectRequest(store_id=store_id, key="alpha"))
        print("alpha ->", resp.value.value, "version", resp.value.version)

        async for kv in vss.iter_key_versions(store_id):
            print(kv.key, kv.version)


if __name__ == "__main__":
    asyncio.run(main())
