"""
Posts a Cloud API style text message to a running webhook

Run:
    python scripts/send_test_message.py "yes"
    python scripts/send_test_message.py "done" --url http://localhost:8000/webhook/whatsapp
"""

import argparse
import asyncio

import httpx


def build_payload(text: str, sender: str, phone_number_id: str) -> dict:
    """What Meta sends for one inbound text message"""
    return {
        "object": "whatsapp_business_account",
        "entry": [{
            "id": phone_number_id,
            "changes": [{
                "value": {
                    "messaging_product": "whatsapp",
                    "metadata": {"phone_number_id": phone_number_id},
                    "messages": [{
                        "from": sender,
                        "id": "wamid.local-test",
                        "type": "text",
                        "text": {"body": text}
                    }]
                },
                "field": "messages"
            }]
        }]
    }


async def send(url: str, payload: dict):
    print(f"🧪 Testing webhook: {url}")
    print(f"📤 Sending: {payload['entry'][0]['changes'][0]['value']['messages'][0]['text']['body']}\n")

    async with httpx.AsyncClient() as client:
        response = await client.post(url, json=payload, timeout=10.0)

    print(f"✅ Status: {response.status_code}")
    print(f"📥 Response: {response.text[:200]}")

    if response.status_code != 200:
        print(f"\n❌ Webhook returned {response.status_code}")


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("text", nargs="?", default="Hi")
    parser.add_argument("--url", default="http://localhost:8000/webhook/whatsapp")
    parser.add_argument("--sender", default="972501234567")
    parser.add_argument("--phone-number-id", default="123456789")
    args = parser.parse_args()

    asyncio.run(send(args.url, build_payload(args.text, args.sender, args.phone_number_id)))


if __name__ == "__main__":
    main()
