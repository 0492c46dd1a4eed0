import os
import uuid
import cv2
from py4web import action, request, abort, redirect, URL
from ombott import static_file
from .common import session, T, load_detector_config
from .settings import UPLOADS_FOLDER, STEERING_STRATEGY, HISTORY_LIMIT
from .logging_setup import get_logger
from .modules.pipeline import FrameProcessor
from .modules.signals import SignalBoard, LEFT_SENDER_STAMP, RIGHT_SENDER_STAMP
from .modules.steering import get_strategy
from .modules.demo_utils import create_sample_frame

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = ['.jpg', '.jpeg', '.png', '.webp']

DEFAULT_FORM = {
    'area_threshold': None,
    'kernel_size': None,
    'blackout': False,
    'steering_strategy': STEERING_STRATEGY,
    'ground_steering': 0.0,
    'left_voltage': 0.0,
    'right_voltage': 0.0,
    'angular_velocity_z': 0.0,
}

def _check_filename(filename):
    # Prevent path traversal attacks
    if '..' in filename or '/' in filename or '\\' in filename:
        return False
    filepath = os.path.join(UPLOADS_FOLDER, filename)
    return os.path.abspath(filepath).startswith(os.path.abspath(UPLOADS_FOLDER))

def _detector_state():
    if 'cone_detector_state' not in session:
        session['cone_detector_state'] = {'chosen_file': None, 'form_data': dict(DEFAULT_FORM)}
    return session['cone_detector_state']

def _read_form():
    def optional_number(key, cast):
        value = request.forms.get(key)
        return cast(value) if value not in (None, '') else None

    return {
        'area_threshold': optional_number('area_threshold', float),
        'kernel_size': optional_number('kernel_size', int),
        'blackout': request.forms.get('blackout') == 'on',
        'steering_strategy': request.forms.get('steering_strategy', STEERING_STRATEGY),
        'ground_steering': float(request.forms.get('ground_steering', 0.0)),
        'left_voltage': float(request.forms.get('left_voltage', 0.0)),
        'right_voltage': float(request.forms.get('right_voltage', 0.0)),
        'angular_velocity_z': float(request.forms.get('angular_velocity_z', 0.0)),
    }

# Dashboard
@action('index')
@action.uses(session, T)
def index():
    return dict(history=session.get('cone_detector_history', []))

@action('clear_history', method='POST')
@action.uses(session)
def clear_history():
    session['cone_detector_history'] = []
    session['sample_generator_history'] = []
    redirect(URL('index'))

# Cone detector
@action('cone_detector', method=['GET', 'POST'])
@action.uses(session, T)
def cone_detector():
    if 'cone_detector_history' not in session:
        session['cone_detector_history'] = []
    state = _detector_state()

    if request.method == 'GET':
        sample_filename = request.params.get('sample')
        if sample_filename:
            if not _check_filename(sample_filename) or not os.path.exists(os.path.join(UPLOADS_FOLDER, sample_filename)):
                return dict(error="Error selecting sample: file not found", results=None,
                            form_data=state['form_data'], chosen_file=state['chosen_file'])
            state['chosen_file'] = sample_filename
            # Mark session as modified for nested mutation
            session['cone_detector_state'] = state

        chosen_file = state['chosen_file']
        return dict(
            error=None,
            results=None,
            image_url=URL('uploads', chosen_file) if chosen_file else None,
            form_data=state['form_data'],
            chosen_file=chosen_file
        )

    try:
        form_data = _read_form()
        state['form_data'] = form_data
        session['cone_detector_state'] = state

        uploaded_file = request.files.get('image')
        if uploaded_file and uploaded_file.filename:
            ext = os.path.splitext(uploaded_file.filename)[1].lower()
            if ext not in ALLOWED_EXTENSIONS:
                return dict(error="Invalid file type", results=None, form_data=form_data, chosen_file=state['chosen_file'])

            safe_filename = f"{uuid.uuid4()}{ext}"
            uploaded_file.save(os.path.join(UPLOADS_FOLDER, safe_filename))
            state['chosen_file'] = safe_filename
            session['cone_detector_state'] = state
        else:
            safe_filename = state.get('chosen_file')

        if not safe_filename:
            return dict(error="No file selected", results=None, form_data=form_data, chosen_file=None)

        file_path = os.path.join(UPLOADS_FOLDER, safe_filename)
        image = cv2.imread(file_path)
        if image is None:
            return dict(error="Could not load image", results=None, form_data=form_data, chosen_file=safe_filename)

        config = load_detector_config(
            area_threshold=form_data['area_threshold'],
            kernel_size=form_data['kernel_size'],
            blackout=form_data['blackout']
        )

        signals = SignalBoard()
        signals.on_ground_steering(form_data['ground_steering'])
        signals.on_voltage_reading(LEFT_SENDER_STAMP, form_data['left_voltage'])
        signals.on_voltage_reading(RIGHT_SENDER_STAMP, form_data['right_voltage'])
        signals.on_angular_velocity(form_data['angular_velocity_z'])

        processor = FrameProcessor(config, get_strategy(form_data['steering_strategy']), signals=signals)
        processed = processor.process(image)

        overlay_filename = f"overlay_{safe_filename}"
        cv2.imwrite(os.path.join(UPLOADS_FOLDER, overlay_filename), processed.overlay)

        img_height, img_width = image.shape[:2]
        results = {
            'yellow': processed.yellow.as_dict(),
            'blue': processed.blue.as_dict(),
            'steering': processed.steering,
            'steering_strategy': form_data['steering_strategy'],
            'ground_steering': processed.verdict.ground_steering,
            'allowed': [processed.verdict.lower_bound, processed.verdict.upper_bound],
            'passed': processed.verdict.passed,
        }

        history_item = {
            'image_filename': safe_filename,
            'overlay_filename': overlay_filename,
            'image_width': img_width,
            'image_height': img_height,
            'num_yellow': len(processed.yellow.bounding_boxes),
            'num_blue': len(processed.blue.bounding_boxes),
            'timestamp': str(uuid.uuid4())
        }
        session['cone_detector_history'].insert(0, history_item)
        session['cone_detector_history'] = session['cone_detector_history'][:HISTORY_LIMIT]

        return dict(
            error=None,
            results=results,
            image_url=URL('uploads', safe_filename),
            overlay_url=URL('uploads', overlay_filename),
            image_width=img_width,
            image_height=img_height,
            form_data=form_data,
            chosen_file=safe_filename
        )

    except Exception as e:
        logger.exception("cone_detection_failed")
        return dict(error=str(e), results=None, form_data=state['form_data'], chosen_file=state['chosen_file'])

# Sample frame generator
@action('sample_generator', method=['GET', 'POST'])
@action.uses(session, T)
def sample_generator():
    if 'sample_generator_history' not in session:
        session['sample_generator_history'] = []

    if request.method == 'GET':
        return dict(error=None, history=session['sample_generator_history'])

    try:
        img_width = int(request.forms.get('img_width', 640))
        img_height = int(request.forms.get('img_height', 480))
        num_cones = int(request.forms.get('num_cones', 4))
        min_size = int(request.forms.get('min_size', 10))
        max_size = int(request.forms.get('max_size', 40))
        colors = tuple(request.forms.get('colors', 'yellow,blue').split(','))

        image, cones = create_sample_frame(
            img_width, img_height, num_cones,
            min_size=min_size, max_size=max_size,
            colors=colors
        )

        filename = f"sample_{uuid.uuid4()}.png"
        cv2.imwrite(os.path.join(UPLOADS_FOLDER, filename), image)

        history_item = {
            'image_filename': filename,
            'image_width': img_width,
            'image_height': img_height,
            'num_cones': len(cones),
            'timestamp': str(uuid.uuid4())
        }
        session['sample_generator_history'].insert(0, history_item)
        session['sample_generator_history'] = session['sample_generator_history'][:HISTORY_LIMIT]

        return dict(
            error=None,
            image_url=URL('uploads', filename),
            image_filename=filename,
            cones=cones,
            history=session['sample_generator_history']
        )

    except Exception as e:
        logger.exception("sample_generation_failed")
        return dict(error=str(e), image_url=None, image_filename=None, cones=[], history=session['sample_generator_history'])

# Serve uploads
@action('uploads/<filename>')
def serve_upload(filename):
    if not _check_filename(filename):
        abort(403)
    return static_file(filename, root=UPLOADS_FOLDER)
