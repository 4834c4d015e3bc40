from gemini_chat import GeminiClient
from normalizer import normalize_chat_request


async def chat(client: GeminiClient, body: object) -> str:
    payload = normalize_chat_request(body)
    return await client.generate_chat(payload.conversation, instruction=payload.instruction)
