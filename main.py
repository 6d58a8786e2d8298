import argparse
import asyncio
import base64
import sys
from pathlib import Path

from google.genai import errors, types

from companion.bootstrap.bootstrapper import bootstrap_agent
from companion.dependencies.services import get_agent_config
from companion.entities.errors import GenerationError


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run a single turn with the agent.")
    parser.add_argument("prompt", help="Message to send to the agent")
    parser.add_argument("--env", default="development")
    parser.add_argument("--output-dir", default="output", type=Path)
    parser.add_argument("--no-photo", action="store_true")
    parser.add_argument("--no-voice", action="store_true")
    return parser.parse_args()


async def main() -> None:
    args = _parse_args()
    agent, components = bootstrap_agent(env=args.env)
    config = get_agent_config(components)
    history: list[types.Content] = []

    try:
        result = await agent.run_turn(
            args.prompt,
            config,
            history,
            with_photo=not args.no_photo,
            with_speech=not args.no_voice,
        )
    except (GenerationError, errors.APIError) as e:
        print(f"{config['name']} could not reply: {e.code}", file=sys.stderr)
        raise SystemExit(1) from e
    finally:
        await components.aclose()

    print(f"{config['name']}: {result.display_text}")

    if result.photo or result.audio_base64:
        args.output_dir.mkdir(parents=True, exist_ok=True)
    if result.photo:
        photo_path = args.output_dir / "photo.png"
        photo_path.write_bytes(result.photo.data)
        print(f"Photo saved to {photo_path}")
    if result.audio_base64:
        voice_path = args.output_dir / "voice.wav"
        voice_path.write_bytes(base64.b64decode(result.audio_base64))
        print(f"Voice note saved to {voice_path}")
    if result.photo_error:
        print(f"Photo unavailable: {result.photo_error.code}")
    if result.speech_error:
        print(f"Voice note unavailable: {result.speech_error.code}")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
