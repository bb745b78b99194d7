# surfspot/api/spots/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List, Iterable

from surfspot.api.comments.services import CommentService
from surfspot.api.users.services import UserService
from surfspot.models.spot import SurfSpot, Location
from surfspot.services.forecast_service import ForecastService, log_forecast_api_usage
from surfspot.utils.datetime_utils import DateTimeUtils


def compute_average_rating(comments: Iterable[Dict[str, Any]]) -> Optional[float]:
    """
    숫자 평점을 가진 댓글들의 평균을 계산합니다. (답글은 평점이 없으므로 자연히 제외)
    평점 댓글이 하나도 없으면 None을 반환하며, 이 값은 저장되지 않고 조회 시점에만 계산됩니다.
    """
    ratings = [
        comment.get('rating') for comment in comments
        if isinstance(comment.get('rating'), (int, float)) and not isinstance(comment.get('rating'), bool)
    ]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


def resolve_location(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    요청 데이터에서 좌표를 꺼냅니다. location 객체가 우선이며, 없으면 최상위 lat/lng를 사용합니다.
    data에서 location, lat, lng 키는 제거됩니다.
    """
    location = data.pop('location', None)
    lat = data.pop('lat', None)
    lng = data.pop('lng', None)
    if location is not None:
        return {'lat': location.get('lat'), 'lng': location.get('lng')}
    if lat is not None and lng is not None:
        return {'lat': float(lat), 'lng': float(lng)}
    return None


class SpotService:
    """
    서핑 스팟 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 스팟 생성/수정 시 예보 갱신 정책을 적용합니다.
    - 스팟 삭제 시 해당 스팟의 댓글을 같은 배치에서 함께 삭제합니다.
    """
    def __init__(self, db,
                 forecast_service: ForecastService,
                 user_service: UserService,
                 comment_service: CommentService):
        self.db = db
        self.spots_ref = self.db.collection('spots')
        self.forecast_service = forecast_service
        self.user_service = user_service
        self.comment_service = comment_service
        logging.info("SpotService initialized with dependencies.")

    def _get_spot(self, spot_id: str) -> Optional[SurfSpot]:
        doc = self.spots_ref.document(spot_id).get()
        if not doc.exists:
            return None
        return SurfSpot.from_dict(doc.to_dict())

    def _to_response(self, spots: List[SurfSpot]) -> List[Dict[str, Any]]:
        return self.user_service.populate([spot.to_dict() for spot in spots])

    def _apply_forecast_policy(self, changes: Dict[str, Any], location: Optional[Location],
                               skip_forecast_update: bool, spot_id: str, action: str) -> None:
        """
        예보 갱신 정책.
        - skip 플래그가 켜져 있으면 외부 API를 호출하지 않고, changes에 forecast가 있어도 버립니다.
        - 위도/경도가 모두 있으면 동기 호출하여 성공 시 스냅샷을 통째로 교체합니다.
        - 실패하면 기존 스냅샷을 그대로 두고 나머지 변경은 계속 진행합니다.
        """
        if skip_forecast_update:
            changes.pop('forecast', None)
            logging.info(f"Skipping forecast update as requested (spot_id: {spot_id})")
            return

        if location is None or not location.has_coordinates():
            return

        snapshot = self.forecast_service.fetch_forecast(location.lat, location.lng)
        log_forecast_api_usage(action, spot_id, snapshot is not None)
        if snapshot:
            changes['forecast'] = asdict(snapshot)

    def list_spots(self) -> List[Dict[str, Any]]:
        """모든 스팟을 작성자 정보와 함께 조회합니다."""
        spots = [SurfSpot.from_dict(doc.to_dict()) for doc in self.spots_ref.stream()]
        return self._to_response(spots)

    def get_spot_detail(self, spot_id: str) -> Optional[Dict[str, Any]]:
        """
        스팟 상세 정보를 조회합니다. 댓글 목록(최신순)과 평균 평점이 포함됩니다.
        스팟이 없으면 댓글을 조회하지 않고 None을 반환합니다.
        """
        spot = self._get_spot(spot_id)
        if not spot:
            return None

        spot_data = self._to_response([spot])[0]
        comments = self.comment_service.get_comments_for_spot(spot_id)

        average = compute_average_rating(comments)
        if average is not None:
            spot_data['rating'] = average
        spot_data['comments'] = comments
        return spot_data

    def create_spot(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """새로운 스팟을 생성합니다. 좌표가 있으면 저장 전에 예보를 조회해 함께 저장합니다."""
        fields = dict(data)
        location = resolve_location(fields)

        spot_id = str(uuid.uuid4())
        spot = SurfSpot.from_dict({
            **fields,
            'spot_id': spot_id,
            'user_id': user_id,
            'location': location,
            'comments': [],
        })
        record = spot.to_dict()

        self._apply_forecast_policy(record, spot.location, False, spot_id, 'create')

        self.spots_ref.document(spot_id).set(DateTimeUtils.for_firestore(record))
        logging.info(f"스팟 생성 완료 (spot_id: {spot_id}, user_id: {user_id})")
        return self._to_response([self._get_spot(spot_id)])[0]

    def update_spot(self, spot_id: str, data: Dict[str, Any], skip_forecast_update: bool = False) -> Dict[str, Any]:
        """
        스팟을 부분 수정합니다. 스팟이 없으면 ValueError.
        요청에 좌표가 포함되고 skip 플래그가 없으면 예보를 다시 조회합니다.
        """
        if not self._get_spot(spot_id):
            raise ValueError("Surf spot not found")

        changes = dict(data)
        location = resolve_location(changes)
        if location is not None:
            changes['location'] = location

        self._apply_forecast_policy(
            changes,
            Location(**location) if location is not None else None,
            skip_forecast_update,
            spot_id,
            'update'
        )

        changes['updated_at'] = DateTimeUtils.now()
        self.spots_ref.document(spot_id).update(DateTimeUtils.for_firestore(changes))
        return self._to_response([self._get_spot(spot_id)])[0]

    def delete_spot(self, spot_id: str) -> None:
        """스팟과 그 스팟의 모든 댓글을 하나의 배치로 삭제합니다. 스팟이 없으면 ValueError."""
        if not self._get_spot(spot_id):
            raise ValueError("Surf spot not found")

        batch = self.db.batch()
        comment_count = self.comment_service.add_spot_comment_deletes(batch, spot_id)
        batch.delete(self.spots_ref.document(spot_id))
        try:
            batch.commit()
        except Exception as e:
            logging.error(f"스팟 삭제 실패 (spot_id: {spot_id}): {e}", exc_info=True)
            raise
        logging.info(f"스팟 삭제 완료 (spot_id: {spot_id}, 함께 삭제된 댓글 수: {comment_count})")
