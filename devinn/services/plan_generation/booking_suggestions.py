"""
航班和酒店建议

尚未接入真实的航班/酒店搜索接口，返回固定的参考数据。
"""

from typing import List

from devinn.schemas.booking import FlightOption, HotelOption
from devinn.schemas.travel_plan import TravelPlan, UserRequirements

DEFAULT_TRAVEL_DATE = "2024-01-01"
FLIGHT_PRICE_PER_PERSON = 2500
HOTEL_PRICE_PER_NIGHT = 1200


class BookingSuggestionService:
    """航班酒店建议"""

    async def generate_flight_suggestions(self, plan: TravelPlan, requirements: UserRequirements) -> List[FlightOption]:
        date = plan.days[0].date if plan.days and plan.days[0].date else DEFAULT_TRAVEL_DATE
        return [FlightOption.model_validate({
            "id": "flight-1",
            "type": "OUTBOUND",
            "airline": {"code": "CA", "name": "中国国际航空", "logo": "https://example.com/ca-logo.png"},
            "flightNumber": "CA123",
            "aircraft": "A320",
            "departure": {"airport": {"code": "PEK", "name": "北京首都国际机场", "terminal": "T3"}, "time": "08:00", "date": date},
            "arrival": {"airport": {"code": "NRT", "name": "东京成田国际机场", "terminal": "T1"}, "time": "12:00", "date": date},
            "duration": {"total": 240, "formatted": "4小时"},
            "stops": [],
            "price": {
                "amount": FLIGHT_PRICE_PER_PERSON,
                "currency": "CNY",
                "pricePerPerson": FLIGHT_PRICE_PER_PERSON,
                "totalPrice": FLIGHT_PRICE_PER_PERSON * requirements.travelers,
                "taxes": 300,
            },
            "cabin": {"class": "ECONOMY", "name": "经济舱", "baggage": {"checkedBags": "23kg", "carryOn": "7kg"}},
            "booking": {"url": "https://example.com/book-flight", "provider": "携程", "availability": 20,
                        "refundable": True, "changeable": True},
            "rating": {"score": 4.2, "punctuality": 85, "comfort": 80, "service": 82},
        })]

    async def generate_hotel_suggestions(self, plan: TravelPlan, requirements: UserRequirements) -> List[HotelOption]:
        return [HotelOption.model_validate({
            "id": "hotel-1",
            "name": "东京皇宫酒店",
            "brand": "皇宫酒店集团",
            "category": "豪华酒店",
            "starRating": 5,
            "location": {
                "address": "东京都千代田区丸之内1-1-1",
                "district": "丸之内",
                "coordinates": [35.6762, 139.7653],
                "nearbyLandmarks": [
                    {"name": "东京站", "distance": 500, "walkingTime": 6},
                    {"name": "皇居", "distance": 800, "walkingTime": 10},
                ],
                "transportation": [
                    {"type": "SUBWAY", "station": "东京站", "distance": 500, "lines": ["JR山手线", "JR中央线"]},
                ],
            },
            "rooms": [{
                "type": "豪华双人房",
                "size": 35,
                "bedType": "大床",
                "maxOccupancy": 2,
                "amenities": ["免费WiFi", "空调", "迷你吧", "保险箱"],
                "pricing": {
                    "basePrice": HOTEL_PRICE_PER_NIGHT,
                    "totalPrice": HOTEL_PRICE_PER_NIGHT * plan.total_days,
                    "currency": "CNY",
                    "taxes": 120,
                    "fees": 50,
                },
            }],
            "amenities": {
                "general": ["免费WiFi", "24小时前台", "行李寄存"],
                "dining": ["餐厅", "酒吧", "客房服务"],
                "recreation": ["健身房", "SPA", "游泳池"],
                "business": ["商务中心", "会议室"],
            },
            "reviews": {
                "overall": 4.5,
                "breakdown": {"cleanliness": 4.6, "comfort": 4.4, "location": 4.8, "service": 4.3, "value": 4.1},
                "totalReviews": 1250,
            },
            "policies": {
                "checkIn": "15:00",
                "checkOut": "11:00",
                "cancellation": {"type": "FREE", "deadline": "入住前24小时", "fee": 0},
                "children": "12岁以下儿童免费",
                "pets": False,
            },
            "booking": {"url": "https://example.com/book-hotel", "provider": "Booking.com", "availability": "AVAILABLE"},
            "images": [{"url": "https://example.com/hotel-exterior.jpg", "caption": "酒店外观", "type": "EXTERIOR"}],
        })]
