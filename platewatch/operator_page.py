"""
Operator Page - single-page UI for the detection workflow
Upload an image, enter watchlist plates, process, review history and alerts
"""

OPERATOR_HTML = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>PlateWatch</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: Georgia, 'Times New Roman', serif;
            background: #c0c0c0;
            color: #000;
            padding: 16px;
        }

        .container {
            max-width: 1100px;
            margin: 0 auto;
        }

        header {
            text-align: center;
            margin-bottom: 16px;
            border-bottom: 2px solid #808080;
            padding-bottom: 8px;
        }

        header h1 { font-size: 26px; }
        header p { font-size: 13px; }

        .layout {
            display: flex;
            gap: 16px;
            flex-wrap: wrap;
        }

        aside { flex: 1 1 300px; }
        main { flex: 2 1 500px; }

        .panel {
            background: #d4d4d4;
            border: 2px outset #eee;
            padding: 14px;
            margin-bottom: 16px;
        }

        .panel h2, .panel h3 {
            margin-bottom: 8px;
        }

        .row {
            display: flex;
            justify-content: space-between;
            align-items: center;
            margin-bottom: 6px;
        }

        textarea {
            width: 100%;
            font-family: monospace;
            font-size: 13px;
            border: 2px inset #eee;
            padding: 4px;
        }

        button {
            background: #d4d4d4;
            border: 2px outset #eee;
            padding: 6px 14px;
            cursor: pointer;
            font-family: inherit;
        }

        button:active { border-style: inset; }
        button:disabled { color: #777; cursor: default; opacity: 0.6; }
        button.small { font-size: 12px; padding: 3px 8px; }
        button.danger { background: #f08080; }
        button.wide { width: 100%; margin-top: 12px; }

        .inset {
            background: #fff;
            border: 2px inset #eee;
            padding: 4px;
            overflow-y: auto;
        }

        #history-box { height: 170px; }
        #alert-box { height: 100px; background: #fffbd0; }

        table {
            width: 100%;
            border-collapse: collapse;
            font-size: 13px;
        }

        th {
            position: sticky;
            top: 0;
            background: #d4d4d4;
            text-align: left;
            padding: 4px;
            border-bottom: 2px solid #808080;
        }

        td {
            padding: 4px;
            vertical-align: top;
            border-bottom: 1px solid #aaa;
            white-space: pre-wrap;
        }

        .mono { font-family: monospace; }
        .error { color: #a00; font-size: 13px; margin-top: 8px; }
        .status { color: #060; font-size: 13px; margin-bottom: 6px; }
        .muted { color: #555; font-size: 13px; }
        .alert-item { color: #b00; font-family: monospace; padding: 3px; border-bottom: 1px solid #e8d870; }

        img.preview { margin-top: 8px; height: 130px; border: 2px inset #eee; padding: 2px; }
        img.result { max-height: 260px; max-width: 100%; border: 2px inset #eee; padding: 2px; }

        pre {
            background: #fff;
            border: 2px inset #eee;
            padding: 8px;
            white-space: pre-wrap;
            font-size: 13px;
        }

        .hidden { display: none; }
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>Intelligent Traffic Violation &amp; Criminal Tracking System</h1>
            <p>Plate reading and violation review for traffic scene photographs.</p>
        </header>

        <div class="layout">
            <aside>
                <div class="panel">
                    <h2>Control Panel</h2>
                    <div class="row">
                        <label for="watchlist"><strong>Criminal Plates DB:</strong></label>
                        <button class="small" id="clear-watchlist" title="Clear criminal plates list">Clear List</button>
                    </div>
                    <textarea id="watchlist" rows="5" placeholder="ABC-1234&#10;XYZ-5678"></textarea>
                </div>

                <div class="panel">
                    <div class="row">
                        <h3>Detection History</h3>
                        <button class="small danger" id="clear-data" title="Clear all detection history and logs">Clear Database</button>
                    </div>
                    <p class="status hidden" id="status"></p>
                    <div class="inset" id="history-box">
                        <table>
                            <thead>
                                <tr><th>License Plate</th><th>Violation</th></tr>
                            </thead>
                            <tbody id="history-body"></tbody>
                        </table>
                    </div>
                </div>

                <div class="panel">
                    <h3>Criminal Alert Log</h3>
                    <div class="inset" id="alert-box"></div>
                </div>
            </aside>

            <main>
                <div class="panel">
                    <h2>Task Execution</h2>
                    <label for="file-upload"><strong>Upload Traffic Image:</strong></label><br>
                    <input id="file-upload" type="file" accept="image/*">
                    <div><img id="preview" class="preview hidden" alt="Preview"></div>
                    <button class="wide" id="process" disabled>Process Image</button>
                    <p class="error hidden" id="error"></p>
                </div>

                <div class="panel" id="results">
                </div>
            </main>
        </div>
    </div>

    <script>
        let session = null;
        let statusTimer = null;

        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = text;
            return div.innerHTML;
        }

        async function api(path, options = {}) {
            const response = await fetch(path, options);
            const data = await response.json().catch(() => ({}));
            if (!response.ok) {
                throw new Error(data.detail || `Request failed (${response.status})`);
            }
            return data;
        }

        function jsonOptions(method, body) {
            return {
                method: method,
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify(body)
            };
        }

        function showError(message) {
            const el = document.getElementById('error');
            el.textContent = message || '';
            el.classList.toggle('hidden', !message);
        }

        function render(state) {
            session = state;

            const watchlist = document.getElementById('watchlist');
            if (document.activeElement !== watchlist) {
                watchlist.value = state.watchlist_text;
            }
            watchlist.disabled = state.is_loading;
            document.getElementById('file-upload').disabled = state.is_loading;
            document.getElementById('clear-watchlist').disabled = state.is_loading || watchlist.value.length === 0;
            document.getElementById('clear-data').disabled = !state.can_clear_data;

            const processBtn = document.getElementById('process');
            processBtn.disabled = !state.can_process;
            processBtn.textContent = state.is_loading ? 'Processing...' : 'Process Image';

            const preview = document.getElementById('preview');
            if (state.has_image) {
                preview.src = '/session/image?t=' + Date.now();
                preview.classList.remove('hidden');
            } else {
                preview.removeAttribute('src');
                preview.classList.add('hidden');
                document.getElementById('file-upload').value = '';
            }

            showError(state.error);

            const status = document.getElementById('status');
            status.textContent = state.status_message || '';
            status.classList.toggle('hidden', !state.status_message);

            const historyBody = document.getElementById('history-body');
            if (state.history.length > 0) {
                historyBody.innerHTML = state.history.map(record => `
                    <tr>
                        <td class="mono">${record.plates.length > 0 ? escapeHtml(record.plates.join(', ')) : 'N/A'}</td>
                        <td>${hasViolation(record.violation) ? escapeHtml(record.violation) : 'None'}</td>
                    </tr>
                `).join('');
                const box = document.getElementById('history-box');
                box.scrollTop = box.scrollHeight;
            } else {
                historyBody.innerHTML = '<tr><td colspan="2" class="muted" style="text-align:center;padding:16px;">History is empty.</td></tr>';
            }

            const alertBox = document.getElementById('alert-box');
            if (state.alert_log.length > 0) {
                alertBox.innerHTML = state.alert_log.map(p => `<div class="alert-item">${escapeHtml(p)}</div>`).join('');
            } else {
                alertBox.innerHTML = '<p class="muted">No criminal plates detected yet.</p>';
            }

            renderResults(state);
        }

        function hasViolation(text) {
            if (!text) return false;
            const value = text.trim().toUpperCase();
            return value.length > 0 && value !== 'NONE';
        }

        function renderResults(state) {
            const results = document.getElementById('results');
            if (state.has_processed_image && !state.is_loading) {
                const plates = state.detected_plates.length > 0
                    ? `<p class="mono" style="color:#124">${escapeHtml(state.detected_plates.join(', '))}</p>`
                    : '<p>No new plates detected in this image.</p>';
                const violations = state.has_violation ? escapeHtml(state.violations) : 'No violations detected.';
                results.innerHTML = `
                    <h3>Results for Current Image</h3>
                    <div style="text-align:center;margin:8px 0;">
                        <img class="result" src="/session/image?t=${Date.now()}" alt="Processed traffic scene">
                    </div>
                    <h4>Detected License Plates:</h4>
                    ${plates}
                    <h4 style="margin-top:10px;">Observed Traffic Violations:</h4>
                    <pre>${violations}</pre>
                `;
            } else {
                const message = state.is_loading
                    ? 'AI is processing the traffic scene... Please wait.'
                    : "Please upload a traffic image and click 'Process Image' to begin.";
                results.innerHTML = `
                    <div style="text-align:center;padding:30px;">
                        <h3>Awaiting Task</h3>
                        <p class="muted">${message}</p>
                    </div>
                `;
            }
        }

        async function refresh() {
            render(await api('/session'));
        }

        async function saveWatchlist() {
            const text = document.getElementById('watchlist').value;
            render(await api('/session/watchlist', jsonOptions('PUT', { text: text })));
        }

        document.getElementById('watchlist').addEventListener('input', () => {
            document.getElementById('clear-watchlist').disabled = document.getElementById('watchlist').value.length === 0;
        });
        document.getElementById('watchlist').addEventListener('change', () => {
            saveWatchlist().catch(err => showError(err.message));
        });

        document.getElementById('clear-watchlist').addEventListener('click', async () => {
            try {
                render(await api('/session/watchlist/clear', { method: 'POST' }));
                document.getElementById('watchlist').value = '';
            } catch (err) {
                showError(err.message);
            }
        });

        document.getElementById('file-upload').addEventListener('change', async (e) => {
            const file = e.target.files && e.target.files[0];
            if (!file) return;
            const form = new FormData();
            form.append('file', file);
            try {
                render(await api('/session/image', { method: 'POST', body: form }));
            } catch (err) {
                showError(err.message);
            }
        });

        document.getElementById('process').addEventListener('click', async () => {
            const processBtn = document.getElementById('process');
            processBtn.disabled = true;
            processBtn.textContent = 'Processing...';
            renderResults(Object.assign({}, session, { is_loading: true }));
            try {
                const text = document.getElementById('watchlist').value;
                const data = await api('/session/process', jsonOptions('POST', { watchlist_text: text }));
                render(data.session);
            } catch (err) {
                showError(err.message);
                await refresh();
            }
        });

        document.getElementById('clear-data').addEventListener('click', async () => {
            if (!confirm('Are you sure you want to permanently delete all detection history and the criminal alert log? This action cannot be undone.')) {
                return;
            }
            try {
                render(await api('/session/clear', jsonOptions('POST', { confirm: true })));
                clearTimeout(statusTimer);
                statusTimer = setTimeout(async () => {
                    render(await api('/session/status/dismiss', { method: 'POST' }));
                }, 3000);
            } catch (err) {
                showError(err.message);
            }
        });

        refresh().catch(err => showError(err.message));
    </script>
</body>
</html>
"""
