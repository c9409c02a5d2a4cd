"""
Example usage of Poster Card Generator

This script demonstrates how to use the API programmatically
"""

import requests
import json


API_URL = "http://localhost:3000"


def render_example():
    """
    Example: Render a poster set via API
    """
    # Check if API is running
    try:
        response = requests.get(f"{API_URL}/health")
        print(f"✓ API Status: ok={response.json()['ok']}")
    except requests.exceptions.ConnectionError:
        print("✗ Error: API is not running. Please start with: python main.py")
        return

    print("\nRendering poster set...")

    payload = {
        "titleDir": "demo",
        "templateName": "default",
        "titleTexts": ["", "<c:#d62828>Hello</c>", "world!"],
        "pages": [
            "First page with <s:48>big</s> and <c:#1d3557>blue</c> words",
            "Second page\nwith an explicit line break",
        ],
        "overrides": {
            "output": {"format": "jpg", "quality": 0.85},
        },
    }

    response = requests.post(f"{API_URL}/render", json=payload)

    if response.status_code == 200:
        result = response.json()["result"]

        print(f"\n✓ Success!")
        print(f"  Cover: {result['cover']}")
        print(f"  Pages: {len(result['texts'])}")
        print(f"  Ending: {result['ending']}")
        print(json.dumps(result["outputs"], indent=2, ensure_ascii=False))
    else:
        print(f"\n✗ Error: {response.status_code}")
        print(response.text)


def list_output_example():
    """
    Example: List all rendered files
    """
    response = requests.get(f"{API_URL}/list-output")

    if response.status_code == 200:
        files = response.json()["files"]

        print(f"\nFound {len(files)} files:")
        for item in files:
            print(f"  - {item['rel_path']} ({item['size']} bytes)")
    else:
        print(f"Error: {response.status_code}")


def direct_pipeline_example():
    """
    Example: Use the composer directly (without API)
    """
    from modules import PosterComposer, RenderRequest

    print("\nRunning composer directly...")

    composer = PosterComposer()
    request = RenderRequest(
        title_dir="direct-demo",
        title_texts=["", "Direct", "render"],
        pages=["Rendered <c:#2a9d8f>without</c> the HTTP layer"],
        disable_overlay=True,
    )

    result = composer.render_all(request)
    print(f"\n✓ Success!")
    print(f"  Output dir: {result.output_dir}")
    for item in result.outputs:
        print(f"  - {item.kind}: {item.filename}")


if __name__ == "__main__":
    import sys

    print("=" * 60)
    print("Poster Card Generator - Example Usage")
    print("=" * 60)

    if len(sys.argv) > 1 and sys.argv[1] == "direct":
        direct_pipeline_example()
    else:
        print("\nMake sure you have:")
        print("1. Put cover.png, text.png and ending.png in template/default/")
        print("2. Started the API server: python main.py")
        print("\nPress Enter to continue...")
        input()

        render_example()
        list_output_example()

    print("\n" + "=" * 60)
