#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ASCII Morph - Web Preview
Run: asciimorph-web [words...]
Opens the browser on http://localhost:5000
"""

import argparse
import logging
import math
import webbrowser
from threading import Timer

from flask import Flask, jsonify, render_template_string, request

from asciimorph.config import AnimatorConfig
from asciimorph.core.session import AnimationSession
from asciimorph.core.words import split_words

logger = logging.getLogger(__name__)

HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>ASCII Morph</title>
    <style>
        * {
            box-sizing: border-box;
            margin: 0;
            padding: 0;
        }

        body {
            background: #0b0b0b;
            color: #e8e8e8;
            overflow: hidden;
        }

        #asciiCanvas {
            position: fixed;
            inset: 0;
            font-family: 'Courier New', monospace;
            font-size: {{ font_px }}px;
            line-height: 1;
            letter-spacing: 0;
            white-space: pre;
        }

        #status {
            position: fixed;
            bottom: 8px;
            right: 12px;
            font-family: 'Courier New', monospace;
            font-size: 12px;
            opacity: 0.6;
            cursor: pointer;
        }
    </style>
</head>
<body>
    <div id="asciiCanvas"></div>
    <div id="status">Start Autoplay</div>
    <script>
        const FRAME_MS = {{ frame_ms }};

        async function post(url, data) {
            const response = await fetch(url, {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(data || {})
            });
            return response.json();
        }

        async function poll() {
            try {
                const response = await fetch('/frame');
                const result = await response.json();
                document.getElementById('asciiCanvas').innerHTML = result.html;
            } catch (error) {
                console.error('Frame error:', error);
            }
            setTimeout(poll, FRAME_MS);
        }

        function wordsFromHash() {
            return decodeURIComponent(window.location.hash.substring(1));
        }

        window.addEventListener('hashchange', () => {
            const words = wordsFromHash();
            if (words.length > 0) post('/words', { words: words });
        });

        window.addEventListener('wheel', (event) => {
            post('/scroll', { delta: event.deltaY });
        });

        document.getElementById('status').addEventListener('click', async () => {
            const result = await post('/autoplay');
            document.getElementById('status').textContent =
                result.autoplay ? 'Stop Autoplay' : 'Start Autoplay';
        });

        if (wordsFromHash().length > 0) post('/words', { words: wordsFromHash() });
        poll();
    </script>
</body>
</html>
"""


def create_app(session: AnimationSession, font_px: int = 10) -> Flask:
    app = Flask(__name__)

    @app.route('/')
    def index():
        return render_template_string(
            HTML_TEMPLATE,
            font_px=font_px,
            frame_ms=int(1000 * session.config.frame_duration),
        )

    @app.route('/frame')
    def frame():
        snapshot = session.renderer.snapshot()
        snapshot['remaining'] = session.scheduler.num_remaining_frames()
        return jsonify(snapshot)

    @app.route('/words', methods=['POST'])
    def words():
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({'success': False, 'error': 'expected a JSON object'}), 400
        lines = split_words(str(data.get('words', '')))
        if not lines:
            return jsonify({'success': False, 'error': 'no words given'}), 400
        session.show_words(lines)
        return jsonify({'success': True, 'words': lines})

    @app.route('/scroll', methods=['POST'])
    def scroll():
        data = request.get_json(silent=True)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            return jsonify({'success': False, 'error': 'expected a JSON object'}), 400
        try:
            delta = float(data.get('delta', 0))
        except (TypeError, ValueError):
            return jsonify({'success': False, 'error': 'delta must be a number'}), 400
        if not math.isfinite(delta):
            return jsonify({'success': False, 'error': 'delta must be a finite number'}), 400
        return jsonify({'success': True, 'applied': session.scroll(delta)})

    @app.route('/autoplay', methods=['POST'])
    def autoplay():
        return jsonify({'success': True, 'autoplay': session.toggle_autoplay()})

    return app


def open_browser(port):
    """Open browser after short delay"""
    webbrowser.open(f'http://localhost:{port}')


def main(argv=None):
    parser = argparse.ArgumentParser(description="Animated ASCII word morphing in the browser")
    parser.add_argument('words', nargs='*', default=['Hello'])
    parser.add_argument('--rows', type=int, default=60)
    parser.add_argument('--cols', type=int, default=180)
    parser.add_argument('--fps', type=int, default=30)
    parser.add_argument('--related-words-url', default=None)
    parser.add_argument('--glyphs', default=None, help="character_matrices.json style glyph table")
    parser.add_argument('--port', type=int, default=5000)
    parser.add_argument('--no-browser', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = AnimatorConfig(
        rows=args.rows,
        cols=args.cols,
        fps=args.fps,
        related_words_url=args.related_words_url,
        glyph_table_path=args.glyphs,
    )
    session = AnimationSession(config)
    session.start(split_words(' '.join(args.words)) or ['Hello'])

    print("=" * 60)
    print("ASCII Morph - Web Preview")
    print("=" * 60)
    print(f"\nServer on http://localhost:{args.port}")
    print("Press Ctrl+C to stop\n")
    print("=" * 60)

    if not args.no_browser:
        Timer(1.5, open_browser, args=(args.port,)).start()

    try:
        create_app(session).run(debug=False, port=args.port, threaded=True)
    finally:
        session.stop()


if __name__ == '__main__':
    main()
